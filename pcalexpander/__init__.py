"""Driver for the PCAL9555 / PCAL95555 16-bit I2C GPIO expander over a pluggable bus."""

__version__ = "1.0.0"
__all__ = ["registers", "config", "driver", "buses"]