import io
import logging
import struct

import pytest

from emu2600cv.core.carts.cart_cv import CartCV, RAM_SIZE
from emu2600cv.core.serializer import Serializer
from emu2600cv.core.settings import Settings


class BrokenStream(io.RawIOBase):
    def writable(self):
        return True

    def write(self, data):
        raise OSError("disk full")


def _saved(cart):
    buf = io.BytesIO()
    assert cart.save(Serializer(buf)) is True
    return buf.getvalue()


def test_save_layout(cart):
    data = _saved(cart)
    assert data[:4] == struct.pack("<I", len("CartridgeCV"))
    assert data[4:15] == b"CartridgeCV"
    assert data[15:] == bytes(cart.ram)
    assert len(data) == 4 + 11 + RAM_SIZE


def test_round_trip_into_fresh_instance(cart, rom_2k):
    cart.patch(0x1000, 0x01)
    cart.patch(0x13FF, 0xFE)
    data = _saved(cart)

    other = CartCV(rom_2k, Settings(ram_seed=999))
    other.reset()
    assert bytes(other.ram) != bytes(cart.ram)
    assert other.load(Serializer(io.BytesIO(data))) is True
    assert bytes(other.ram) == bytes(cart.ram)


def test_load_rejects_foreign_tag(cart, caplog):
    buf = io.BytesIO()
    out = Serializer(buf)
    out.put_string("CartridgeF8SC")
    out.put_byte_array(bytes(RAM_SIZE))
    buf.seek(0)

    before = bytes(cart.ram)
    with caplog.at_level(logging.ERROR):
        assert cart.load(Serializer(buf)) is False
    assert bytes(cart.ram) == before
    assert not caplog.records


def test_load_truncated_stream_fails_without_mutation(cart, caplog):
    data = _saved(cart)
    cart.patch(0x1000, (cart.ram[0] + 1) & 0xFF)
    before = bytes(cart.ram)

    with caplog.at_level(logging.ERROR):
        assert cart.load(Serializer(io.BytesIO(data[:40]))) is False
    assert bytes(cart.ram) == before
    assert "CartridgeCV.load failed" in caplog.text


def test_load_empty_stream(cart, caplog):
    with caplog.at_level(logging.ERROR):
        assert cart.load(Serializer(io.BytesIO())) is False
    assert "CartridgeCV.load failed" in caplog.text


def test_save_io_failure_is_reported(cart, caplog):
    with caplog.at_level(logging.ERROR):
        assert cart.save(Serializer(BrokenStream())) is False
    assert "CartridgeCV.save failed" in caplog.text


def test_dict_snapshot(cart, rom_2k):
    snap = cart.get_snapshot()
    assert snap["name"] == "CartridgeCV"

    other = CartCV(rom_2k, Settings(ram_random=False))
    other.reset()
    other.restore_snapshot(snap)
    assert bytes(other.ram) == bytes(cart.ram)


def test_dict_snapshot_rejects_bad_input(cart):
    with pytest.raises(ValueError):
        cart.restore_snapshot({"name": "CartridgeF8", "ram": bytes(RAM_SIZE)})
    with pytest.raises(ValueError):
        cart.restore_snapshot({"name": "CartridgeCV", "ram": bytes(10)})


def test_save_to_closed_stream_fails(cart, caplog):
    buf = io.BytesIO()
    buf.close()
    with caplog.at_level(logging.ERROR):
        assert cart.save(Serializer(buf)) is False
    assert "CartridgeCV.save failed" in caplog.text


def test_load_from_closed_stream_fails(cart, caplog):
    buf = io.BytesIO(_saved(cart))
    buf.close()
    before = bytes(cart.ram)
    with caplog.at_level(logging.ERROR):
        assert cart.load(Serializer(buf)) is False
    assert bytes(cart.ram) == before
    assert "CartridgeCV.load failed" in caplog.text


def test_load_oversized_tag_length(cart):
    before = bytes(cart.ram)
    data = struct.pack("<I", 0x7FFFFFFF) + b"CartridgeCV"
    assert cart.load(Serializer(io.BytesIO(data))) is False
    assert bytes(cart.ram) == before
