"""Shared fixtures for the EMU2600CV test suite.

The repository root is put on sys.path so the suite runs from a plain
checkout as well as from an installed package.
"""
import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from emu2600cv.core.address_space import AddressSpace
from emu2600cv.core.carts.cart_cv import CartCV
from emu2600cv.core.settings import Settings


@pytest.fixture
def rom_2k():
    return bytes((i * 7 + 3) & 0xFF for i in range(2048))


@pytest.fixture
def ram_payload():
    return bytes((i ^ 0x5A) & 0xFF for i in range(1024))


@pytest.fixture
def image_4k(rom_2k, ram_payload):
    # 1 KB RAM payload, 1 KB unused, 2 KB ROM
    return ram_payload + bytes([0xEE]) * 1024 + rom_2k


@pytest.fixture
def bus():
    return AddressSpace(addr_space_shift=13, page_shift=6)


@pytest.fixture
def cart(rom_2k):
    """2 KB cart with a fixed floating bus value, not installed."""
    c = CartCV(rom_2k, Settings(ram_seed=1234), data_bus=lambda: 0xAB)
    c.reset()
    c.bank_changed()
    return c


@pytest.fixture
def installed(rom_2k, bus):
    c = CartCV(rom_2k, Settings(ram_random=False, ram_fill=0x00))
    c.install(bus)
    c.reset()
    c.bank_changed()
    return c, bus
