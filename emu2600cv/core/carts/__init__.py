# EMU2600CV Cart mappers
"""
Cartridge mappers for the Atari 2600.

Use :meth:`Cart.create(rom_bytes, cart_type) <cart.Cart.create>` to
instantiate the correct mapper for a given :class:`~emu2600cv.core.types.CartType`.
"""

from emu2600cv.core.carts.cart import Cart
from emu2600cv.core.carts.cart_cv import CartCV

__all__ = [
    "Cart",
    "CartCV",
]
