"""
Cartridge creation factory for EMU2600CV.

Creates a cartridge from a ROM file path, installs it into a fresh
address space, and resets it so it is ready for bus traffic.

Typical usage::

    cart, bus = CartFactory.create("magicard.bin")
    cart, bus = CartFactory.create("game.bin", settings=Settings(ram_seed=7))
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

from emu2600cv.core.address_space import AddressSpace
from emu2600cv.core.carts.cart import Cart
from emu2600cv.core.settings import Settings
from emu2600cv.core.types import CartType
from emu2600cv.shell.services.rom_bytes_service import RomBytesService

logger = logging.getLogger(__name__)


class CartFactory:
    """Create an installed cartridge from a ROM file."""

    @staticmethod
    def create(
        rom_path: str,
        cart_type: Optional[Union[CartType, str]] = None,
        settings: Optional[Settings] = None,
    ) -> tuple[Cart, AddressSpace]:
        """Build a cart, install it on a new 2600 address space and reset it.

        Parameters
        ----------
        rom_path:
            Filesystem path to the ROM image.
        cart_type:
            Mapper to use, as a :class:`CartType` or its name.  Type detection
            is not performed; ``None`` selects :attr:`CartType.CV`.
        settings:
            RAM power-on configuration.

        Raises
        ------
        FileNotFoundError
            If *rom_path* does not exist.
        ValueError
            If the cart type is unknown or the image size does not fit it.
        """
        if isinstance(cart_type, str):
            try:
                cart_type = CartType[cart_type]
            except KeyError:
                raise ValueError(f"Unknown cart type: {cart_type!r}") from None
        if cart_type is None:
            cart_type = CartType.CV

        logger.info("Loading ROM: %s", rom_path)
        rom_bytes = RomBytesService.read(rom_path)
        logger.info("ROM size: %d bytes", len(rom_bytes))

        cart = Cart.create(rom_bytes, cart_type, settings)
        logger.info("Cart created: %r", cart)

        bus = AddressSpace(addr_space_shift=13, page_shift=6)
        cart.install(bus)
        cart.reset()
        return cart, bus

    @staticmethod
    def describe(rom_path: str) -> dict[str, str]:
        """Return a human-readable description of a CV ROM file.

        Returns a dict with keys: ``title``, ``image_size``, ``rom_md5``,
        ``initial_ram``.
        """
        rom_bytes = RomBytesService.read(rom_path)
        info = RomBytesService.inspect_cv(rom_bytes)

        return {
            "title": os.path.basename(rom_path),
            "image_size": str(info.image_size),
            "rom_md5": info.rom_md5,
            "initial_ram": info.initial_ram_md5 if info.has_initial_ram else "none",
        }
