# pcalexpander

A register-level driver for the PCAL9555 / PCAL95555 16-bit I²C GPIO expander.
The chip has 16 pins split into two 8-bit ports. Pins 0–7 are on port 0 and
pins 8–15 are on port 1.

The driver does not talk to hardware itself. You give it an object that
implements the `I2CBus` interface, so it works with any I²C library and can be
tested against a simulated bus.

## Installation

```
pip install pcalexpander
```

To run the test suite from a checkout:

```
pip install ".[test]"
pytest
```

## Modules

- `pcalexpander.registers`: the `Register` address map, the enums `GPIODir`,
  `Polarity`, `DriveStrength` and `OutputMode`, the `Error` flag enum, and
  `port_register(pin, port0_register, port1_register)`. That function returns
  the register and bit that hold a pin. It raises `ValueError` for a pin
  outside 0–15.
- `pcalexpander.config`: `PinConfig` and `InitConfig`, which describe a
  start-up configuration.
- `pcalexpander.driver`: the `I2CBus` interface, the `PCAL95555` driver and
  its exceptions.
- `pcalexpander.buses`: `DummyBus`.

## Providing a bus

Subclass `pcalexpander.driver.I2CBus` and implement its two methods:

- `write(address, register, data)` writes the bytes `data` to consecutive
  registers of the device at the 7-bit `address`, starting at `register`. It
  returns nothing.
- `read(address, register, length)` returns `length` bytes read from
  consecutive registers, starting at `register`.

Both methods report a failure, such as a NACK, by raising `OSError`. The driver
retries on `OSError`. Any other exception passes straight through.

`pcalexpander.buses.DummyBus` accepts every write and returns zero bytes for
every read. Use it to try the API without a device.

## Usage

```python
from pcalexpander.buses import DummyBus
from pcalexpander.driver import PCAL95555
from pcalexpander.registers import DriveStrength, GPIODir, Polarity

gpio = PCAL95555(DummyBus(), 0x20)
gpio.reset_to_default()

gpio.set_pin_direction(0, GPIODir.OUTPUT)
gpio.write_pin(0, True)
gpio.toggle_pin(0)

gpio.set_pull_enable(9, True)
gpio.set_pull_direction(9, pull_up=True)
gpio.set_drive_strength(0, DriveStrength.LEVEL2)
gpio.set_pin_polarity(9, Polarity.INVERTED)
level = gpio.read_pin(9)
```

The constructor raises `ValueError` if the address is not a 7-bit address.

### Driver methods

Single-pin operations:

- `set_pin_direction`
- `read_pin`
- `write_pin`
- `toggle_pin`
- `set_pull_enable`
- `set_pull_direction`
- `set_drive_strength`
- `set_pin_polarity`
- `enable_input_latch`

Each one reads the register that holds the pin, changes that pin's bits, and
writes the register back.

Operations on several pins at once:

- `set_multiple_directions(mask, direction)`
- `set_multiple_polarities(mask, polarity)`
- `enable_multiple_input_latches(mask, enable)`

Each of these changes every pin whose bit is set in the 16-bit `mask`.

Whole-device operations:

- `set_output_mode(port0_open_drain, port1_open_drain)` chooses open-drain or
  push-pull outputs for each port.
- `reset_to_default()` writes the datasheet's power-on values to every
  configurable register.

Raw register access:

- `read_register(register)` reads one register, with retries.
- `write_register(register, value)` writes one byte, with retries.

### Retries and errors

A failed transfer is retried. By default it is tried twice, the first attempt
plus one retry. `set_retries(n)` allows `n + 1` attempts. A negative `n` raises
`ValueError`.

Failures raise exceptions from `pcalexpander.driver`, all derived from
`PCAL95555Error`:

- `InvalidPinError` is raised for a pin index outside 0–15. It is also a
  `ValueError`.
- `I2CReadError` is raised when a register read fails on every attempt.
- `I2CWriteError` is raised when a register write fails on every attempt.

Each of these chains the last `OSError` from the bus.

A mask outside 0–0xFFFF raises `ValueError`. So does a register value outside
0–0xFF.

`reset_to_default()` and `init_from_config()` attempt every write they hold,
then raise the first `I2CWriteError` that occurred.

The driver also latches `Error` flags. The `error_flags` property returns them
as an `Error` value. `clear_error_flags(mask)` clears the flags selected by
`mask`, or all of them when called with no argument. A later successful
transfer, or a valid pin or mask, clears the matching flag.

### Interrupts

```python
gpio.configure_interrupt_mask(0xFFFE)        # a 0 bit enables that pin's interrupt
gpio.set_interrupt_callback(lambda status: print(f"{status:#06x}"))
gpio.handle_interrupt()                      # call from your INT line handler
```

`interrupt_status()` reads both status registers and returns a 16-bit mask. On
the device, reading the status registers clears them.

`handle_interrupt()` does nothing if no callback is set. Passing `None` to
`set_interrupt_callback` removes the callback.

### Start-up configuration

`InitConfig` holds 16-bit masks for start-up. Bit N of each mask belongs to
pin N. The fields are:

- `direction` (1 means input)
- `pull_enable`
- `pull_up`
- `output`
- `port0_open_drain`
- `port1_open_drain`

Its defaults are the power-on state: all pins inputs, pulls disabled, pull-up
selected, outputs low, push-pull.

`InitConfig.from_pins(pins, ...)` builds the masks from up to 16 `PinConfig`
entries, starting with pin 0. Pins you leave out keep `PinConfig`'s defaults.

`gpio.init_from_config(config)` writes these registers:

- output
- direction
- pull-enable
- pull-select
- output-configuration

With no argument it writes the defaults.

```python
from pcalexpander.config import InitConfig, PinConfig
from pcalexpander.registers import GPIODir

config = InitConfig.from_pins(
    [PinConfig(direction=GPIODir.OUTPUT, output=True)],
    port0_open_drain=True,
)
gpio.init_from_config(config)
```

## What it does not do

The package has no command-line tool. It also ships no bus that reaches real
hardware. `DummyBus` is the only bus included, and it does not touch any
device. To drive a chip, you write an `I2CBus` subclass over the I²C library of
your platform.