"""Start-up configuration for the expander's direction, pull and output registers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .registers import PIN_COUNT, GPIODir

_FULL_MASK = 0xFFFF


@dataclass(frozen=True)
class PinConfig:
    """Initial settings of one pin; defaults match the device's power-on state."""

    direction: GPIODir = GPIODir.INPUT
    pull_enable: bool = False
    pull_up: bool = True
    output: bool = False


@dataclass(frozen=True)
class InitConfig:
    """Port-wide 16-bit masks written when the device is initialised.

    Bit N of each mask belongs to pin N; bits 0-7 are port 0, bits 8-15 port 1.
    """

    direction: int = _FULL_MASK
    pull_enable: int = 0
    pull_up: int = _FULL_MASK
    output: int = 0
    port0_open_drain: bool = False
    port1_open_drain: bool = False

    def __post_init__(self) -> None:
        for name in ("direction", "pull_enable", "pull_up", "output"):
            value = getattr(self, name)
            if not 0 <= value <= _FULL_MASK:
                raise ValueError(f"{name} mask {value:#x} does not fit in 16 bits")

    @classmethod
    def from_pins(
        cls,
        pins: Iterable[PinConfig],
        port0_open_drain: bool = False,
        port1_open_drain: bool = False,
    ) -> InitConfig:
        """Build masks from per-pin settings, pin 0 first.

        Pins not given keep the power-on defaults of :class:`PinConfig`.
        """
        given = list(pins)
        if len(given) > PIN_COUNT:
            raise ValueError(f"at most {PIN_COUNT} pins may be configured, got {len(given)}")
        given.extend(PinConfig() for _ in range(PIN_COUNT - len(given)))

        def mask(flag) -> int:
            return sum(1 << pin for pin, cfg in enumerate(given) if flag(cfg))

        return cls(
            direction=mask(lambda cfg: cfg.direction == GPIODir.INPUT),
            pull_enable=mask(lambda cfg: cfg.pull_enable),
            pull_up=mask(lambda cfg: cfg.pull_up),
            output=mask(lambda cfg: cfg.output),
            port0_open_drain=port0_open_drain,
            port1_open_drain=port1_open_drain,
        )

    def output_conf(self) -> int:
        """Value of the output configuration register (bit 0 port 0, bit 1 port 1)."""
        return (int(self.port1_open_drain) << 1) | int(self.port0_open_drain)