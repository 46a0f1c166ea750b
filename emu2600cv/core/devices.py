"""
Core device abstractions for EMU2600CV.

IDevice is the abstract interface for all memory-mapped devices.
NullDevice is a no-op device used as a placeholder in the address space.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class IDevice(ABC):
    """Abstract interface for all memory-mapped devices in the address space."""

    @abstractmethod
    def reset(self) -> None:
        """Reset the device to its initial power-on state."""
        ...

    @abstractmethod
    def peek(self, addr: int) -> int:
        """Read a byte from the device at the given address.

        Args:
            addr: The raw address on the bus (device applies its own masking).

        Returns:
            An integer in the range 0..255.
        """
        ...

    @abstractmethod
    def poke(self, addr: int, value: int) -> bool:
        """Write a byte to the device at the given address.

        Args:
            addr: The raw address on the bus (device applies its own masking).
            value: The byte value to write (0..255).

        Returns:
            True if the write changed device state.
        """
        ...

    def __getitem__(self, addr: int) -> int:
        return self.peek(addr)

    def __setitem__(self, addr: int, value: int) -> None:
        self.poke(addr, value)


class NullDevice(IDevice):
    """A device that ignores all writes and always reads as zero.

    Used as the default mapping for unmapped pages in the address space so that
    accesses to unmapped regions do not raise exceptions.
    """

    _instance: Optional[NullDevice] = None

    def __new__(cls) -> NullDevice:
        """NullDevice is a singleton -- every call returns the same instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def reset(self) -> None:
        pass

    def peek(self, addr: int) -> int:
        return 0

    def poke(self, addr: int, value: int) -> bool:
        return False

    def __repr__(self) -> str:
        return "NullDevice()"
