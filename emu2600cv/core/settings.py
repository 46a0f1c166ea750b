"""
Emulator settings consumed by the cartridge layer.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """Power-on configuration for cartridge RAM.

    Attributes:
        ram_random: Fill uninitialised RAM with pseudo-random bytes instead of
                    ``ram_fill``.  Real SRAM powers up in an arbitrary state.
        ram_seed:   Seed for the pseudo-random fill.  The generator is
                    re-seeded on every reset so the pattern is reproducible.
        ram_fill:   Byte used when ``ram_random`` is False.
    """

    ram_random: bool = True
    ram_seed: int = 0
    ram_fill: int = 0x00

    def __post_init__(self) -> None:
        if not 0 <= self.ram_fill <= 0xFF:
            raise ValueError(f"ram_fill must be a byte value, got {self.ram_fill}")
        if self.ram_seed < 0:
            raise ValueError(f"ram_seed must be non-negative, got {self.ram_seed}")


DEFAULT_SETTINGS: Settings = Settings()
