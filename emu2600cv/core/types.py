"""
Core enumerations and type definitions for EMU2600CV.
"""

from enum import Enum, IntEnum, IntFlag


class CartType(IntEnum):
    Unknown = 0
    CV = 1


class PageAccessType(IntFlag):
    """How the bus may touch a page: directly, via the device, or both."""
    READ = 1 << 0
    WRITE = 1 << 1
    READWRITE = READ | WRITE


class PortKind(Enum):
    """Role of an address window inside the CV cart's 4 KB slot."""
    RAM_READ = "ram_read"
    RAM_WRITE = "ram_write"
    ROM_READ = "rom_read"


class DisasmType(IntFlag):
    """Per-byte classification bits stored in a code access base.

    Written by an external disassembler; the cart only allocates the buffer
    and seeds it with ``ROW``.
    """
    NONE = 0
    REFERENCED = 1 << 0
    VALID_ENTRY = 1 << 1
    SKIP = 1 << 2
    CODE = 1 << 3
    GFX = 1 << 4
    PGFX = 1 << 5
    DATA = 1 << 6
    ROW = 1 << 7
