"""Register-level driver for the PCAL9555 16-bit I²C GPIO expander."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from .config import InitConfig
from .registers import (
    PINS_PER_PORT,
    DriveStrength,
    Error,
    GPIODir,
    Polarity,
    Register,
    port_register,
)

_BYTE_MASK = 0xFF
_WORD_MASK = 0xFFFF

InterruptCallback = Callable[[int], None]

_DEFAULT_REGISTERS: tuple[tuple[Register, int], ...] = (
    (Register.OUTPUT_PORT_0, 0xFF),
    (Register.OUTPUT_PORT_1, 0xFF),
    (Register.POLARITY_INV_0, 0x00),
    (Register.POLARITY_INV_1, 0x00),
    (Register.CONFIG_PORT_0, 0xFF),
    (Register.CONFIG_PORT_1, 0xFF),
    (Register.DRIVE_STRENGTH_0, 0xFF),
    (Register.DRIVE_STRENGTH_1, 0xFF),
    (Register.DRIVE_STRENGTH_2, 0xFF),
    (Register.DRIVE_STRENGTH_3, 0xFF),
    (Register.INPUT_LATCH_0, 0x00),
    (Register.INPUT_LATCH_1, 0x00),
    (Register.PULL_ENABLE_0, 0xFF),
    (Register.PULL_ENABLE_1, 0xFF),
    (Register.PULL_SELECT_0, 0xFF),
    (Register.PULL_SELECT_1, 0xFF),
    (Register.INT_MASK_0, 0xFF),
    (Register.INT_MASK_1, 0xFF),
    (Register.OUTPUT_CONF, 0x00),
)


class I2CBus(ABC):
    """Transport used by the driver; implementations raise OSError on NACK or failure."""

    @abstractmethod
    def write(self, address: int, register: int, data: bytes) -> None:
        """Write ``data`` to consecutive registers starting at ``register``."""

    @abstractmethod
    def read(self, address: int, register: int, length: int) -> bytes:
        """Read ``length`` bytes from consecutive registers starting at ``register``."""


class PCAL95555Error(Exception):
    """Base class of the driver's errors."""


class InvalidPinError(PCAL95555Error, ValueError):
    """A pin index outside 0-15 was given."""

    def __init__(self, pin: int) -> None:
        super().__init__(f"pin {pin} is out of range 0-15")
        self.pin = pin


class I2CReadError(PCAL95555Error):
    """Reading a register failed on every attempt."""

    def __init__(self, register: int) -> None:
        super().__init__(f"reading register {register:#04x} failed")
        self.register = register


class I2CWriteError(PCAL95555Error):
    """Writing a register failed on every attempt."""

    def __init__(self, register: int) -> None:
        super().__init__(f"writing register {register:#04x} failed")
        self.register = register


def _with_bit(value: int, bit: int, set_bit: bool) -> int:
    return value | (1 << bit) if set_bit else value & ~(1 << bit) & _BYTE_MASK


def _with_bits(value: int, bits: int, set_bits: bool) -> int:
    return value | bits if set_bits else value & ~bits & _BYTE_MASK


class PCAL95555:
    """Driver for one PCAL9555 expander on an I²C bus."""

    def __init__(self, bus: I2CBus, address: int) -> None:
        if not 0 <= address <= 0x7F:
            raise ValueError(f"I2C address {address:#x} is not a 7-bit address")
        self._bus = bus
        self._address = address
        self._retries = 1
        self._flags = 0
        self._callback: InterruptCallback | None = None

    # -- error bookkeeping -------------------------------------------------

    def set_retries(self, retries: int) -> None:
        """Set how many times a failed transfer is retried (``retries + 1`` attempts)."""
        if retries < 0:
            raise ValueError("retries must not be negative")
        self._retries = retries

    @property
    def error_flags(self) -> Error:
        """Error conditions currently latched."""
        return Error(self._flags)

    def clear_error_flags(self, mask: int = _WORD_MASK) -> None:
        """Clear the latched errors selected by ``mask`` (all by default)."""
        self._flags &= ~int(mask) & _WORD_MASK

    def _set_error(self, error: Error) -> None:
        self._flags |= int(error)

    def _clear_error(self, error: Error) -> None:
        self._flags &= ~int(error) & _WORD_MASK

    # -- raw register access ----------------------------------------------

    def read_register(self, register: int) -> int:
        """Read one register, retrying on failure."""
        failure: OSError | None = None
        for _ in range(self._retries + 1):
            try:
                data = self._bus.read(self._address, register, 1)
            except OSError as exc:
                failure = exc
                continue
            self._clear_error(Error.I2C_READ_FAIL)
            return data[0]
        self._set_error(Error.I2C_READ_FAIL)
        raise I2CReadError(register) from failure

    def write_register(self, register: int, value: int) -> None:
        """Write one byte to a register, retrying on failure."""
        if not 0 <= value <= _BYTE_MASK:
            raise ValueError(f"register value {value:#x} does not fit in a byte")
        payload = bytes([value])
        failure: OSError | None = None
        for _ in range(self._retries + 1):
            try:
                self._bus.write(self._address, register, payload)
            except OSError as exc:
                failure = exc
                continue
            self._clear_error(Error.I2C_WRITE_FAIL)
            return
        self._set_error(Error.I2C_WRITE_FAIL)
        raise I2CWriteError(register) from failure

    def _write_all(self, writes: list[tuple[Register, int]]) -> None:
        """Attempt every write, then raise for the first one that failed."""
        first_failure: I2CWriteError | None = None
        for register, value in writes:
            try:
                self.write_register(register, value)
            except I2CWriteError as exc:
                first_failure = first_failure or exc
        if first_failure is not None:
            raise first_failure

    # -- helpers -------------------------------------------------------------

    def _locate(self, pin: int, port0: Register, port1: Register) -> tuple[Register, int]:
        try:
            located = port_register(pin, port0, port1)
        except ValueError:
            self._set_error(Error.INVALID_PIN)
            raise InvalidPinError(pin) from None
        self._clear_error(Error.INVALID_PIN)
        return located

    def _check_mask(self, mask: int) -> None:
        if not 0 <= mask <= _WORD_MASK:
            self._set_error(Error.INVALID_MASK)
            raise ValueError(f"mask {mask:#x} has bits outside pins 0-15")
        self._clear_error(Error.INVALID_MASK)

    def _update_pin(self, pin: int, port0: Register, port1: Register, set_bit: bool) -> None:
        register, bit = self._locate(pin, port0, port1)
        value = self.read_register(register)
        self.write_register(register, _with_bit(value, bit, set_bit))

    def _update_mask(self, mask: int, port0: Register, port1: Register, set_bits: bool) -> None:
        self._check_mask(mask)
        for register, bits in ((port0, mask & _BYTE_MASK), (port1, (mask >> 8) & _BYTE_MASK)):
            value = self.read_register(register)
            self.write_register(register, _with_bits(value, bits, set_bits))

    # -- device setup -----------------------------------------------------

    def reset_to_default(self) -> None:
        """Write the datasheet's power-on values to every configurable register."""
        self._write_all(list(_DEFAULT_REGISTERS))

    def init_from_config(self, config: InitConfig | None = None) -> None:
        """Write output, direction, pull and output-mode registers from ``config``."""
        config = config or InitConfig()
        self._write_all(
            [
                (Register.OUTPUT_PORT_0, config.output & _BYTE_MASK),
                (Register.OUTPUT_PORT_1, (config.output >> 8) & _BYTE_MASK),
                (Register.CONFIG_PORT_0, config.direction & _BYTE_MASK),
                (Register.CONFIG_PORT_1, (config.direction >> 8) & _BYTE_MASK),
                (Register.PULL_ENABLE_0, config.pull_enable & _BYTE_MASK),
                (Register.PULL_ENABLE_1, (config.pull_enable >> 8) & _BYTE_MASK),
                (Register.PULL_SELECT_0, config.pull_up & _BYTE_MASK),
                (Register.PULL_SELECT_1, (config.pull_up >> 8) & _BYTE_MASK),
                (Register.OUTPUT_CONF, config.output_conf()),
            ]
        )

    # -- pin operations -----------------------------------------------------

    def set_pin_direction(self, pin: int, direction: GPIODir) -> None:
        """Make ``pin`` an input or an output."""
        self._update_pin(
            pin, Register.CONFIG_PORT_0, Register.CONFIG_PORT_1, direction == GPIODir.INPUT
        )

    def set_multiple_directions(self, mask: int, direction: GPIODir) -> None:
        """Set the direction of every pin whose bit is set in ``mask``."""
        self._update_mask(
            mask, Register.CONFIG_PORT_0, Register.CONFIG_PORT_1, direction == GPIODir.INPUT
        )

    def read_pin(self, pin: int) -> bool:
        """Return the input level of ``pin``."""
        register, bit = self._locate(pin, Register.INPUT_PORT_0, Register.INPUT_PORT_1)
        return bool(self.read_register(register) & (1 << bit))

    def write_pin(self, pin: int, value: bool) -> None:
        """Drive output ``pin`` high or low."""
        self._update_pin(pin, Register.OUTPUT_PORT_0, Register.OUTPUT_PORT_1, bool(value))

    def toggle_pin(self, pin: int) -> None:
        """Invert the output level of ``pin``."""
        register, bit = self._locate(pin, Register.OUTPUT_PORT_0, Register.OUTPUT_PORT_1)
        value = self.read_register(register)
        self.write_register(register, value ^ (1 << bit))

    def set_pull_enable(self, pin: int, enable: bool) -> None:
        """Enable or disable the pull resistor of ``pin``."""
        self._update_pin(pin, Register.PULL_ENABLE_0, Register.PULL_ENABLE_1, bool(enable))

    def set_pull_direction(self, pin: int, pull_up: bool) -> None:
        """Select pull-up (True) or pull-down (False) for ``pin``."""
        self._update_pin(pin, Register.PULL_SELECT_0, Register.PULL_SELECT_1, bool(pull_up))

    def set_drive_strength(self, pin: int, level: DriveStrength) -> None:
        """Set the two-bit output drive strength of ``pin``."""
        base, index = self._locate(pin, Register.DRIVE_STRENGTH_0, Register.DRIVE_STRENGTH_2)
        register = base + (1 if index >= PINS_PER_PORT // 2 else 0)
        shift = (index % 4) * 2
        value = self.read_register(register)
        value = (value & ~(0x3 << shift) & _BYTE_MASK) | (int(level) << shift)
        self.write_register(register, value)

    # -- interrupts and output mode --------------------------------------

    def configure_interrupt_mask(self, mask: int) -> None:
        """Write the interrupt mask; a 0 bit enables the pin's interrupt."""
        self._check_mask(mask)
        self.write_register(Register.INT_MASK_0, mask & _BYTE_MASK)
        self.write_register(Register.INT_MASK_1, (mask >> 8) & _BYTE_MASK)

    def interrupt_status(self) -> int:
        """Read (and thereby clear) the 16-bit interrupt status."""
        low = self.read_register(Register.INT_STATUS_0)
        high = self.read_register(Register.INT_STATUS_1)
        return (high << 8) | low

    def set_output_mode(self, port0_open_drain: bool, port1_open_drain: bool) -> None:
        """Choose open-drain or push-pull outputs per port."""
        value = (int(bool(port1_open_drain)) << 1) | int(bool(port0_open_drain))
        self.write_register(Register.OUTPUT_CONF, value)

    def set_pin_polarity(self, pin: int, polarity: Polarity) -> None:
        """Set input polarity inversion of ``pin``."""
        self._update_pin(
            pin, Register.POLARITY_INV_0, Register.POLARITY_INV_1, polarity == Polarity.INVERTED
        )

    def set_multiple_polarities(self, mask: int, polarity: Polarity) -> None:
        """Set input polarity of every pin selected by ``mask``."""
        self._update_mask(
            mask, Register.POLARITY_INV_0, Register.POLARITY_INV_1, polarity == Polarity.INVERTED
        )

    def enable_input_latch(self, pin: int, enable: bool) -> None:
        """Enable or disable the input latch of ``pin``."""
        self._update_pin(pin, Register.INPUT_LATCH_0, Register.INPUT_LATCH_1, bool(enable))

    def enable_multiple_input_latches(self, mask: int, enable: bool) -> None:
        """Enable or disable the input latch of every pin selected by ``mask``."""
        self._update_mask(mask, Register.INPUT_LATCH_0, Register.INPUT_LATCH_1, bool(enable))

    def set_interrupt_callback(self, callback: InterruptCallback | None) -> None:
        """Register the function called with the status mask on each interrupt."""
        self._callback = callback

    def handle_interrupt(self) -> None:
        """Read the interrupt status and pass it to the registered callback, if any."""
        if self._callback is not None:
            self._callback(self.interrupt_status())