"""Little-endian reading and writing of the primitive wire elements.

Readers need a ``read(n)`` method and writers a ``write(data)`` method.
Reading past the end of the stream raises :class:`EOFError` when nothing at
all could be read and :class:`UnexpectedEOFError` when only part of an
element arrived. A writer that accepts fewer bytes than it was given raises
:class:`OSError`.
"""

from __future__ import annotations

import os
import struct
from typing import Protocol

from bsvp2p.chainhash import HASH_SIZE, Hash

__all__ = [
    "UnexpectedEOFError",
    "read_full",
    "read_uint8",
    "read_uint16",
    "read_uint32",
    "read_uint64",
    "read_int32",
    "read_int64",
    "read_bool",
    "write_uint8",
    "write_uint16",
    "write_uint32",
    "write_uint64",
    "write_int32",
    "write_int64",
    "write_bool",
    "read_hash",
    "write_hash",
    "random_uint64",
]


class _Reader(Protocol):
    def read(self, size: int, /) -> bytes: ...


class _Writer(Protocol):
    def write(self, data: bytes, /) -> int | None: ...


class UnexpectedEOFError(EOFError):
    """Raised when the stream ends part way through an element."""

    def __init__(self, message: str = "unexpected EOF") -> None:
        super().__init__(message)


_UINT8 = struct.Struct("<B")
_UINT16 = struct.Struct("<H")
_UINT32 = struct.Struct("<I")
_UINT64 = struct.Struct("<Q")
_INT32 = struct.Struct("<i")
_INT64 = struct.Struct("<q")
_UINT64_BE = struct.Struct(">Q")


def read_full(reader: _Reader, size: int) -> bytes:
    """Read exactly ``size`` bytes from ``reader``."""
    if size < 0:
        raise ValueError(f"negative read size {size}")
    buf = bytearray()
    while len(buf) < size:
        chunk = reader.read(size - len(buf))
        if not chunk:
            break
        buf += chunk
    if len(buf) == size:
        return bytes(buf)
    if not buf:
        raise EOFError("EOF")
    raise UnexpectedEOFError()


def _write(writer: _Writer, data: bytes) -> None:
    written = writer.write(data)
    if written is not None and written < len(data):
        raise OSError("short write")


def _pack(fmt: struct.Struct, value: int) -> bytes:
    try:
        return fmt.pack(value)
    except struct.error as exc:
        raise ValueError(f"value {value!r} out of range: {exc}") from exc


def read_uint8(reader: _Reader) -> int:
    """Read one unsigned byte."""
    return _UINT8.unpack(read_full(reader, 1))[0]


def read_uint16(reader: _Reader) -> int:
    """Read a little-endian unsigned 16-bit integer."""
    return _UINT16.unpack(read_full(reader, 2))[0]


def read_uint32(reader: _Reader) -> int:
    """Read a little-endian unsigned 32-bit integer."""
    return _UINT32.unpack(read_full(reader, 4))[0]


def read_uint64(reader: _Reader) -> int:
    """Read a little-endian unsigned 64-bit integer."""
    return _UINT64.unpack(read_full(reader, 8))[0]


def read_int32(reader: _Reader) -> int:
    """Read a little-endian signed 32-bit integer."""
    return _INT32.unpack(read_full(reader, 4))[0]


def read_int64(reader: _Reader) -> int:
    """Read a little-endian signed 64-bit integer."""
    return _INT64.unpack(read_full(reader, 8))[0]


def read_bool(reader: _Reader) -> bool:
    """Read one byte; any non-zero value is True."""
    return read_uint8(reader) != 0


def write_uint8(writer: _Writer, value: int) -> None:
    """Write one unsigned byte."""
    _write(writer, _pack(_UINT8, value))


def write_uint16(writer: _Writer, value: int) -> None:
    """Write a little-endian unsigned 16-bit integer."""
    _write(writer, _pack(_UINT16, value))


def write_uint32(writer: _Writer, value: int) -> None:
    """Write a little-endian unsigned 32-bit integer."""
    _write(writer, _pack(_UINT32, value))


def write_uint64(writer: _Writer, value: int) -> None:
    """Write a little-endian unsigned 64-bit integer."""
    _write(writer, _pack(_UINT64, value))


def write_int32(writer: _Writer, value: int) -> None:
    """Write a little-endian signed 32-bit integer."""
    _write(writer, _pack(_INT32, value))


def write_int64(writer: _Writer, value: int) -> None:
    """Write a little-endian signed 64-bit integer."""
    _write(writer, _pack(_INT64, value))


def write_bool(writer: _Writer, value: bool) -> None:
    """Write True as 0x01 and False as 0x00."""
    _write(writer, b"\x01" if value else b"\x00")


def read_hash(reader: _Reader) -> Hash:
    """Read the 32 raw bytes of a hash."""
    return Hash(read_full(reader, HASH_SIZE))


def write_hash(writer: _Writer, value: Hash) -> None:
    """Write the 32 raw bytes of a hash."""
    _write(writer, bytes(value))


def random_uint64(reader: _Reader | None = None) -> int:
    """Return a random unsigned 64-bit integer.

    Eight bytes are taken big-endian from ``reader``, or from the operating
    system's cryptographic random source when no reader is given.
    """
    data = os.urandom(8) if reader is None else read_full(reader, 8)
    return _UINT64_BE.unpack(data)[0]