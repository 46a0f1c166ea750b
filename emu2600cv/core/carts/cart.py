"""
Base Cart class and factory for EMU2600CV cartridges.

The Cart abstract base class extends IDevice and provides the common interface
for cartridge types: installation into the address space, debugger patching,
save-state support, and the bookkeeping a debugger polls (bank-changed flag,
bank lock, illegal RAM access).  The static ``create()`` factory maps
:class:`~emu2600cv.core.types.CartType` values to concrete implementations.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Optional

import numpy as np

from emu2600cv.core.devices import IDevice
from emu2600cv.core.settings import DEFAULT_SETTINGS, Settings
from emu2600cv.core.types import CartType, DisasmType

if TYPE_CHECKING:
    from emu2600cv.core.address_space import AddressSpace
    from emu2600cv.core.serializer import Serializer

logger = logging.getLogger(__name__)


class Cart(IDevice, ABC):
    """Abstract base class for all cartridge types.

    Attributes:
        settings:   RAM power-on configuration.
        data_bus:   Accessor returning the value currently floating on the
                    data bus.  Bound by :meth:`install` unless supplied at
                    construction.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        data_bus: Optional[Callable[[], int]] = None,
    ) -> None:
        self.settings: Settings = settings if settings is not None else DEFAULT_SETTINGS
        self.data_bus: Optional[Callable[[], int]] = data_bus
        self._data_bus_supplied: bool = data_bus is not None
        self.code_access_base: bytearray = bytearray()
        self._bank_changed: bool = False
        self._bank_locked: bool = False
        self._ram_read_access: int = 0

    # ------------------------------------------------------------------
    # Cart interface
    # ------------------------------------------------------------------

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifying tag written at the head of saved state."""
        ...

    @abstractmethod
    def install(self, addr_space: AddressSpace) -> None:
        """Register this cart's pages with *addr_space*."""
        ...

    @abstractmethod
    def patch(self, addr: int, value: int) -> bool:
        """Write *value* at *addr* ignoring port restrictions (debugger only)."""
        ...

    @abstractmethod
    def get_image(self) -> memoryview:
        """Return a read-only view of the ROM image."""
        ...

    @abstractmethod
    def save(self, out: Serializer) -> bool:
        ...

    @abstractmethod
    def load(self, in_: Serializer) -> bool:
        ...

    # ------------------------------------------------------------------
    # Debugger bookkeeping
    # ------------------------------------------------------------------

    def bank_changed(self) -> bool:
        """Return whether cart memory changed since the last call, then clear it."""
        changed = self._bank_changed
        self._bank_changed = False
        return changed

    @property
    def bank_locked(self) -> bool:
        return self._bank_locked

    def lock_bank(self) -> None:
        """Freeze cart state; reads with side effects stop mutating memory."""
        self._bank_locked = True

    def unlock_bank(self) -> None:
        self._bank_locked = False

    def trigger_read_from_write_port(self, addr: int) -> None:
        """Record a read of a write-only RAM port at *addr*."""
        self._ram_read_access = addr

    def get_illegal_ram_access(self) -> int:
        """Return the last write-port address that was read (0 if none), then clear it."""
        addr = self._ram_read_access
        self._ram_read_access = 0
        return addr

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def create_code_access_base(self, size: int) -> None:
        """Allocate *size* bytes of disassembly flags, all marked ``ROW``."""
        self.code_access_base = bytearray([DisasmType.ROW]) * size

    def initialize_ram(self, ram: bytearray) -> None:
        """Fill *ram* with its power-on contents according to :attr:`settings`."""
        if self.settings.ram_random:
            rng = np.random.default_rng(self.settings.ram_seed)
            ram[:] = rng.integers(0, 256, size=len(ram), dtype=np.uint8).tobytes()
            logger.debug("RAM filled from seed %d", self.settings.ram_seed)
        else:
            ram[:] = bytes([self.settings.ram_fill]) * len(ram)
            logger.debug("RAM filled with $%02X", self.settings.ram_fill)

    def data_bus_state(self) -> int:
        if self.data_bus is None:
            return 0xFF
        return self.data_bus() & 0xFF

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @staticmethod
    def create(
        rom_bytes: bytes,
        cart_type: CartType,
        settings: Optional[Settings] = None,
    ) -> "Cart":
        """Create the appropriate Cart subclass for *cart_type*.

        Raises:
            ValueError: If *cart_type* is unknown or the image does not fit it.
        """
        from emu2600cv.core.carts.cart_cv import CartCV

        _cart_map = {
            CartType.CV: CartCV,
        }

        cls = _cart_map.get(cart_type)
        if cls is None:
            raise ValueError(f"Unknown or unsupported cart type: {cart_type!r}")

        logger.debug("Creating %s for a %d-byte image", cls.__name__, len(rom_bytes))
        return cls(rom_bytes, settings)

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rom_size={len(self.get_image())})"
