"""
ROM loading service for EMU2600CV.

Responsibilities:
  - Read ROM files from disk.
  - Split a CV image into its ROM and optional pre-written RAM payload for
    display purposes.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Optional


# ---------------------------------------------------------------------------
# CV image layout
# ---------------------------------------------------------------------------

_CV_ROM_SIZE: int = 2048
_CV_RAM_SIZE: int = 1024
_CV_IMAGE_SIZES: frozenset[int] = frozenset({_CV_ROM_SIZE, 2 * _CV_ROM_SIZE})


@dataclass(frozen=True)
class CVImageInfo:
    """Summary of a CV image as found on disk."""

    image_size: int
    rom_md5: str
    has_initial_ram: bool
    initial_ram_md5: Optional[str]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class RomBytesService:
    """Static utility for loading ROM files and inspecting CV images."""

    @staticmethod
    def read(path: str) -> bytes:
        """Read a ROM file from *path*.

        Raises:
            FileNotFoundError: If *path* does not exist.
            OSError: On general I/O failure.
        """
        with open(path, "rb") as fh:
            return fh.read()

    @staticmethod
    def is_cv_size(rom_bytes: bytes) -> bool:
        """Return ``True`` if *rom_bytes* is a 2 KB or 4 KB image."""
        return len(rom_bytes) in _CV_IMAGE_SIZES

    @staticmethod
    def inspect_cv(rom_bytes: bytes) -> CVImageInfo:
        """Describe the ROM and RAM payload of a CV image.

        Raises:
            ValueError: If *rom_bytes* is not 2048 or 4096 bytes.
        """
        if not RomBytesService.is_cv_size(rom_bytes):
            raise ValueError(
                f"CV image must be {sorted(_CV_IMAGE_SIZES)} bytes, got {len(rom_bytes)}"
            )

        rom = rom_bytes[-_CV_ROM_SIZE:]
        has_ram = len(rom_bytes) == 2 * _CV_ROM_SIZE
        ram_md5 = hashlib.md5(rom_bytes[:_CV_RAM_SIZE]).hexdigest() if has_ram else None

        return CVImageInfo(
            image_size=len(rom_bytes),
            rom_md5=hashlib.md5(rom).hexdigest(),
            has_initial_ram=has_ram,
            initial_ram_md5=ram_md5,
        )
