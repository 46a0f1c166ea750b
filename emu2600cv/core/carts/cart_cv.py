"""
CommaVid (CV) cartridge for the Atari 2600.

The board carries 2 KB of ROM and 1 KB of RAM.  The 2600 cart slot has no
R/W line, so the RAM is wired to two address ranges: one decoded for writes
and one for reads.

=============  =======  ==============================================
Range          Mask     Port
=============  =======  ==============================================
$1000-$13FF    0x03FF   RAM read   (direct peek, code access at 2048+)
$1400-$17FF    0x03FF   RAM write  (direct poke, no direct peek)
$1800-$1FFF    0x07FF   ROM read   (direct peek, code access at 0)
=============  =======  ==============================================

Reading the write port still strobes the RAM's write enable: whatever value
is floating on the data bus is latched into RAM and returned to the CPU.

A 4 KB image carries a pre-written RAM payload in its first 1 KB (used by
MagiCard program listings); the ROM is always the last 2 KB.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from emu2600cv.core.address_space import PageAccess
from emu2600cv.core.carts.cart import Cart
from emu2600cv.core.settings import Settings
from emu2600cv.core.types import PageAccessType, PortKind

if TYPE_CHECKING:
    from emu2600cv.core.address_space import AddressSpace
    from emu2600cv.core.serializer import Serializer

logger = logging.getLogger(__name__)

ROM_SIZE: int = 2048
RAM_SIZE: int = 1024
ROM_MASK: int = 0x07FF
RAM_MASK: int = 0x03FF


@dataclass(frozen=True)
class Window:
    """A contiguous range of the cart slot bound to one port."""

    start: int
    end: int
    kind: PortKind

    def __contains__(self, addr: int) -> bool:
        return self.start <= addr < self.end


WINDOWS: tuple[Window, ...] = (
    Window(0x1800, 0x2000, PortKind.ROM_READ),
    Window(0x1400, 0x1800, PortKind.RAM_WRITE),
    Window(0x1000, 0x1400, PortKind.RAM_READ),
)


def port_kind(addr: int) -> PortKind:
    """Classify *addr* (any mirror) by the port it hits."""
    addr = 0x1000 | (addr & 0x0FFF)
    for window in WINDOWS:
        if addr in window:
            return window.kind
    raise AssertionError(f"CV windows do not cover ${addr:04X}")


class CartCV(Cart):
    """CommaVid 2 KB ROM + 1 KB RAM cartridge (CV scheme)."""

    VALID_SIZES: tuple[int, ...] = (ROM_SIZE, 2 * ROM_SIZE)

    def __init__(
        self,
        rom_bytes: bytes,
        settings: Optional[Settings] = None,
        data_bus: Optional[Callable[[], int]] = None,
    ) -> None:
        super().__init__(settings, data_bus)
        if len(rom_bytes) not in self.VALID_SIZES:
            raise ValueError(
                f"CV image must be {self.VALID_SIZES} bytes, got {len(rom_bytes)}"
            )

        self._image: bytearray = bytearray(rom_bytes[-ROM_SIZE:])
        self._ram: bytearray = bytearray(RAM_SIZE)
        self._initial_ram: Optional[bytes] = (
            bytes(rom_bytes[:RAM_SIZE]) if len(rom_bytes) == 2 * ROM_SIZE else None
        )
        self.create_code_access_base(ROM_SIZE + RAM_SIZE)

    @property
    def name(self) -> str:
        return "CartridgeCV"

    @property
    def ram(self) -> memoryview:
        """Read-only view of cart RAM."""
        return memoryview(self._ram).toreadonly()

    @property
    def initial_ram(self) -> Optional[bytes]:
        """Factory RAM payload from a 4 KB image, or None for a 2 KB image."""
        return self._initial_ram

    def reset(self) -> None:
        if self._initial_ram is not None:
            self._ram[:] = self._initial_ram
            logger.debug("%s reset from initial RAM image", self.name)
        else:
            self.initialize_ram(self._ram)
        self._bank_changed = True

    # ------------------------------------------------------------------
    # Address decoding
    # ------------------------------------------------------------------

    def install(self, addr_space: AddressSpace) -> None:
        # An accessor given at construction wins; otherwise follow the
        # address space the cart was most recently installed on.
        if not self._data_bus_supplied:
            self.data_bus = addr_space.get_data_bus_state

        for window in WINDOWS:
            for addr in range(window.start, window.end, addr_space.page_size):
                access = self._page_access(window.kind, addr, addr_space.page_size)
                addr_space.set_page_access(addr >> addr_space.page_shift, access)

        logger.debug("%s installed at $1000-$1FFF", self.name)

    def _page_access(self, kind: PortKind, addr: int, page_size: int) -> PageAccess:
        image = memoryview(self._image)
        ram = memoryview(self._ram)
        code = memoryview(self.code_access_base)

        if kind is PortKind.ROM_READ:
            offset = addr & ROM_MASK
            return PageAccess(
                device=self,
                type=PageAccessType.READ,
                direct_peek_base=image[offset:offset + page_size],
                code_access_base=code[offset:offset + page_size],
            )
        if kind is PortKind.RAM_WRITE:
            offset = addr & RAM_MASK
            # No peek base: reads must reach peek() for the write-port quirk.
            return PageAccess(
                device=self,
                type=PageAccessType.WRITE,
                direct_poke_base=ram[offset:offset + page_size],
            )
        offset = addr & RAM_MASK
        return PageAccess(
            device=self,
            type=PageAccessType.READ,
            direct_peek_base=ram[offset:offset + page_size],
            code_access_base=code[ROM_SIZE + offset:ROM_SIZE + offset + page_size],
        )

    # ------------------------------------------------------------------
    # Access emulation
    # ------------------------------------------------------------------

    def peek(self, addr: int) -> int:
        # The read port is served by direct peek bases, so anything in the
        # low 2 KB that lands here is a read of the write port.
        if port_kind(addr) is PortKind.ROM_READ:
            return self._image[addr & ROM_MASK]

        value = self.data_bus_state()
        if self.bank_locked:
            return value

        self.trigger_read_from_write_port(addr)
        self._ram[addr & RAM_MASK] = value
        self._bank_changed = True
        return value

    def poke(self, addr: int, value: int) -> bool:
        # RAM writes go through the direct poke bases; nothing else is writable.
        return False

    def patch(self, addr: int, value: int) -> bool:
        addr &= 0x0FFF
        if addr < 0x0800:
            self._ram[addr & RAM_MASK] = value & 0xFF
        else:
            self._image[addr & ROM_MASK] = value & 0xFF
        self._bank_changed = True
        return True

    def get_image(self) -> memoryview:
        return memoryview(self._image).toreadonly()

    # ------------------------------------------------------------------
    # Save-state support
    # ------------------------------------------------------------------

    def save(self, out: Serializer) -> bool:
        try:
            out.put_string(self.name)
            out.put_byte_array(self._ram)
        except OSError as exc:
            logger.error("%s.save failed: %s", self.name, exc)
            return False
        return True

    def load(self, in_: Serializer) -> bool:
        try:
            if in_.get_string() != self.name:
                return False
            ram = in_.get_byte_array(RAM_SIZE)
        except OSError as exc:
            logger.error("%s.load failed: %s", self.name, exc)
            return False

        self._ram[:] = ram
        return True

    def get_snapshot(self) -> dict:
        """Return a serialisable snapshot of the cart RAM."""
        return {"name": self.name, "ram": bytes(self._ram)}

    def restore_snapshot(self, snapshot: dict) -> None:
        """Restore cart RAM from :meth:`get_snapshot` output.

        Raises:
            ValueError: If the snapshot belongs to another cart or is the
                        wrong size.
        """
        if snapshot.get("name") != self.name:
            raise ValueError(f"Snapshot is not for {self.name}: {snapshot.get('name')!r}")
        ram = snapshot.get("ram", b"")
        if len(ram) != RAM_SIZE:
            raise ValueError(
                f"Snapshot size mismatch: expected {RAM_SIZE}, got {len(ram)}"
            )
        self._ram[:] = ram
