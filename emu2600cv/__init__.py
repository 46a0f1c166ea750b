# EMU2600CV
"""
CommaVid (CV) cartridge core for an Atari 2600 emulator.

The cartridge is installed into an :class:`~emu2600cv.core.address_space.AddressSpace`
and driven by the surrounding CPU step loop.
"""

__version__ = "1.0.0"
