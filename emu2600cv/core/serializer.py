"""
Binary state stream used by save-state support.

Strings are written as a little-endian ``uint32`` byte count followed by
UTF-8 data.  Byte arrays are written raw; the reader must know their size.
"""

from __future__ import annotations

import struct
from typing import BinaryIO

_UINT32 = struct.Struct("<I")


class SerializerError(OSError):
    """Raised when the stream is short, truncated, or holds malformed data."""


class Serializer:
    """Read and write primitive values on a binary stream.

    Args:
        stream: Any binary file-like object (``io.BytesIO``, an open file, ...).
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    # -- stream access -----------------------------------------------------

    def _write(self, data: bytes) -> None:
        try:
            self._stream.write(data)
        except ValueError as exc:
            # Closed or detached streams raise ValueError rather than OSError.
            raise SerializerError(f"Cannot write to stream: {exc}") from exc

    def _read_exact(self, size: int) -> bytes:
        try:
            data = self._stream.read(size)
        except ValueError as exc:
            raise SerializerError(f"Cannot read from stream: {exc}") from exc
        if data is None or len(data) != size:
            got = 0 if data is None else len(data)
            raise SerializerError(f"Short read: expected {size} bytes, got {got}")
        return data

    # -- writing -----------------------------------------------------------

    def put_int(self, value: int) -> None:
        try:
            packed = _UINT32.pack(value)
        except struct.error as exc:
            raise SerializerError(f"Cannot encode int {value!r}: {exc}") from exc
        self._write(packed)

    def put_bool(self, value: bool) -> None:
        self._write(b"\x01" if value else b"\x00")

    def put_string(self, value: str) -> None:
        data = value.encode("utf-8")
        self.put_int(len(data))
        self._write(data)

    def put_byte_array(self, data: bytes) -> None:
        self._write(bytes(data))

    # -- reading -----------------------------------------------------------

    def get_int(self) -> int:
        return _UINT32.unpack(self._read_exact(_UINT32.size))[0]

    def get_bool(self) -> bool:
        return self._read_exact(1) != b"\x00"

    def get_string(self) -> str:
        data = self._read_exact(self.get_int())
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SerializerError(f"Malformed string in stream: {exc}") from exc

    def get_byte_array(self, size: int) -> bytes:
        return self._read_exact(size)
