"""
AddressSpace -- page-granularity memory map of the Atari 2600 bus.

The 6507 drives 13 address lines, so the space is 8 KB.  It is split into
64-byte pages; each page carries a :class:`PageAccess` describing how reads
and writes on that page are satisfied:

* **direct_peek_base** -- a ``memoryview`` the bus reads straight from.
* **direct_poke_base** -- a ``memoryview`` the bus writes straight into.
* **code_access_base** -- a ``memoryview`` of per-byte disassembly flags.

When a base is absent the access falls back to the page's ``device``.  The
bus only holds views into buffers owned by the devices; it never copies them.

The last byte that crossed the bus is kept in :attr:`data_bus_state`.  Some
cartridges return it when a read hits a location that drives nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional

from emu2600cv.core.devices import IDevice, NullDevice
from emu2600cv.core.types import PageAccessType


@dataclass
class PageAccess:
    """Access descriptor for a single page."""

    device: IDevice = field(default_factory=NullDevice)
    type: PageAccessType = PageAccessType.READ
    direct_peek_base: Optional[memoryview] = None
    direct_poke_base: Optional[memoryview] = None
    code_access_base: Optional[memoryview] = None


class AddressSpace:
    """Page table for the host bus.

    Parameters
    ----------
    addr_space_shift:
        Number of address lines (13 for the 2600).
    page_shift:
        log2 of the page size (6 -> 64-byte pages).
    """

    def __init__(self, addr_space_shift: int = 13, page_shift: int = 6) -> None:
        self.addr_space_shift: int = addr_space_shift
        self.page_shift: int = page_shift
        self.addr_mask: int = (1 << addr_space_shift) - 1
        self.page_size: int = 1 << page_shift
        self.page_mask: int = self.page_size - 1
        self.num_pages: int = 1 << (addr_space_shift - page_shift)

        self._pages: List[PageAccess] = [PageAccess() for _ in range(self.num_pages)]
        self.data_bus_state: int = 0

    # ------------------------------------------------------------------
    # Page table
    # ------------------------------------------------------------------

    def set_page_access(self, page: int, access: PageAccess) -> None:
        """Install a copy of *access* for *page*."""
        if not 0 <= page < self.num_pages:
            raise IndexError(f"Page {page} outside 0..{self.num_pages - 1}")
        self._pages[page] = replace(access)

    def get_page_access(self, page: int) -> PageAccess:
        return self._pages[page]

    def page_of(self, addr: int) -> int:
        return (addr & self.addr_mask) >> self.page_shift

    # ------------------------------------------------------------------
    # Bus traffic
    # ------------------------------------------------------------------

    def peek(self, addr: int) -> int:
        addr &= self.addr_mask
        access = self._pages[addr >> self.page_shift]
        if access.direct_peek_base is not None:
            result = access.direct_peek_base[addr & self.page_mask]
        else:
            result = access.device.peek(addr)
        self.data_bus_state = result
        return result

    def poke(self, addr: int, value: int) -> None:
        addr &= self.addr_mask
        value &= 0xFF
        access = self._pages[addr >> self.page_shift]
        if access.direct_poke_base is not None:
            access.direct_poke_base[addr & self.page_mask] = value
        else:
            access.device.poke(addr, value)
        self.data_bus_state = value

    def get_data_bus_state(self) -> int:
        """Return the value last seen on the data bus."""
        return self.data_bus_state

    # ------------------------------------------------------------------
    # Debugger helpers
    # ------------------------------------------------------------------

    def get_access_flags(self, addr: int) -> int:
        addr &= self.addr_mask
        access = self._pages[addr >> self.page_shift]
        if access.code_access_base is None:
            return 0
        return access.code_access_base[addr & self.page_mask]

    def set_access_flags(self, addr: int, flags: int) -> None:
        """OR *flags* into the code access byte for *addr*, if the page has one."""
        addr &= self.addr_mask
        access = self._pages[addr >> self.page_shift]
        if access.code_access_base is not None:
            access.code_access_base[addr & self.page_mask] |= flags & 0xFF

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __getitem__(self, addr: int) -> int:
        return self.peek(addr)

    def __setitem__(self, addr: int, value: int) -> None:
        self.poke(addr, value)

    def __repr__(self) -> str:
        return (
            f"AddressSpace(pages={self.num_pages}, page_size={self.page_size}, "
            f"data_bus_state=0x{self.data_bus_state:02X})"
        )
