"""Variable length integers, strings and byte arrays on the wire.

A variable length integer takes one byte for values below ``0xfd`` and
otherwise a one-byte discriminant (``0xfd``, ``0xfe`` or ``0xff``) followed
by a little-endian 16, 32 or 64-bit value. Strings and byte arrays are
written as such an integer holding their length, followed by their bytes.
"""

from __future__ import annotations

from typing import Protocol

from bsvp2p.wire.elements import (
    _write,
    read_full,
    read_uint8,
    read_uint16,
    read_uint32,
    read_uint64,
    write_uint8,
    write_uint16,
    write_uint32,
    write_uint64,
)
from bsvp2p.wire.error import MessageError

__all__ = [
    "MAX_VAR_INT_PAYLOAD",
    "DEFAULT_MAX_MESSAGE_PAYLOAD",
    "max_message_payload",
    "set_max_message_payload",
    "read_var_int",
    "write_var_int",
    "var_int_serialize_size",
    "read_var_string",
    "write_var_string",
    "read_var_bytes",
    "write_var_bytes",
]


class _Reader(Protocol):
    def read(self, size: int, /) -> bytes: ...


class _Writer(Protocol):
    def write(self, data: bytes, /) -> int | None: ...


MAX_VAR_INT_PAYLOAD = 9
"""The largest number of bytes a variable length integer can take."""

DEFAULT_MAX_MESSAGE_PAYLOAD = 32 * 1024 * 1024

_MAX_UINT16 = 0xFFFF
_MAX_UINT32 = 0xFFFFFFFF
_MAX_UINT64 = 0xFFFFFFFFFFFFFFFF

_max_message_payload = DEFAULT_MAX_MESSAGE_PAYLOAD


def max_message_payload() -> int:
    """Return the largest payload, in bytes, a message may carry."""
    return _max_message_payload


def set_max_message_payload(size: int) -> None:
    """Set the largest payload, in bytes, a message may carry."""
    global _max_message_payload
    if isinstance(size, bool) or not isinstance(size, int):
        raise TypeError(f"message payload limit must be an int, not {type(size).__name__}")
    if not 0 <= size <= _MAX_UINT64:
        raise ValueError(f"message payload limit {size} out of range")
    _max_message_payload = size


def _non_canonical(value: int, discriminant: int, minimum: int) -> MessageError:
    return MessageError(
        "ReadVarInt",
        f"non-canonical varint {value:x} - discriminant {discriminant:x} must "
        f"encode a value greater than {minimum:x}",
    )


def read_var_int(reader: _Reader, pver: int = 0) -> int:
    """Read a variable length integer.

    Raises :class:`MessageError` if the value could have been encoded in
    fewer bytes.
    """
    discriminant = read_uint8(reader)
    if discriminant == 0xFF:
        value, minimum = read_uint64(reader), 0x100000000
    elif discriminant == 0xFE:
        value, minimum = read_uint32(reader), 0x10000
    elif discriminant == 0xFD:
        value, minimum = read_uint16(reader), 0xFD
    else:
        return discriminant
    if value < minimum:
        raise _non_canonical(value, discriminant, minimum)
    return value


def write_var_int(writer: _Writer, pver: int, value: int) -> None:
    """Write ``value`` using the fewest bytes the encoding allows."""
    if value < 0 or value > _MAX_UINT64:
        raise ValueError(f"varint value {value} out of range")
    if value < 0xFD:
        write_uint8(writer, value)
    elif value <= _MAX_UINT16:
        write_uint8(writer, 0xFD)
        write_uint16(writer, value)
    elif value <= _MAX_UINT32:
        write_uint8(writer, 0xFE)
        write_uint32(writer, value)
    else:
        write_uint8(writer, 0xFF)
        write_uint64(writer, value)


def var_int_serialize_size(value: int) -> int:
    """Return the number of bytes ``value`` takes as a variable length integer."""
    if value < 0xFD:
        return 1
    if value <= _MAX_UINT16:
        return 3
    if value <= _MAX_UINT32:
        return 5
    return 9


def read_var_string(reader: _Reader, pver: int = 0) -> str:
    """Read a length-prefixed string.

    Raises :class:`MessageError` if the length exceeds the maximum message
    payload. Bytes that are not valid UTF-8 are kept as surrogate escapes so
    that writing the string back gives the same bytes.
    """
    count = read_var_int(reader, pver)
    limit = max_message_payload()
    if count > limit:
        raise MessageError(
            "ReadVarString",
            f"variable length string is too long [count {count}, max {limit}]",
        )
    return read_full(reader, count).decode("utf-8", errors="surrogateescape")


def write_var_string(writer: _Writer, pver: int, text: str) -> None:
    """Write ``text`` as its UTF-8 length followed by its UTF-8 bytes."""
    data = text.encode("utf-8", errors="surrogateescape")
    write_var_int(writer, pver, len(data))
    _write(writer, data)


def read_var_bytes(reader: _Reader, pver: int, max_allowed: int, field_name: str) -> bytes:
    """Read a length-prefixed byte array of at most ``max_allowed`` bytes.

    ``field_name`` only appears in the error raised when the limit is
    exceeded.
    """
    count = read_var_int(reader, pver)
    if count > max_allowed:
        raise MessageError(
            "ReadVarBytes",
            f"{field_name} is larger than the max allowed size "
            f"[count {count}, max {max_allowed}]",
        )
    return read_full(reader, count)


def write_var_bytes(writer: _Writer, pver: int, data: bytes) -> None:
    """Write ``data`` as its length followed by its bytes."""
    raw = bytes(data)
    write_var_int(writer, pver, len(raw))
    _write(writer, raw)