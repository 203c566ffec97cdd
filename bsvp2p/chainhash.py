"""Fixed-size hash values and the SHA-256 helpers that produce them.

A :class:`Hash` holds 32 raw bytes, usually the double SHA-256 of some data.
Its text form is the hexadecimal of the byte-reversed value, as used
throughout the bitcoin protocol.
"""

from __future__ import annotations

import binascii
import hashlib
import json

__all__ = [
    "HASH_SIZE",
    "MAX_HASH_STRING_SIZE",
    "HashStrSizeError",
    "Hash",
    "hash_from_json",
    "new_hash",
    "new_hash_from_str",
    "decode",
    "hash_b",
    "hash_h",
    "double_hash_b",
    "double_hash_h",
]

HASH_SIZE = 32
MAX_HASH_STRING_SIZE = HASH_SIZE * 2


class HashStrSizeError(ValueError):
    """Raised when a hash string has more characters than a hash can hold."""

    def __init__(self) -> None:
        super().__init__(f"max hash string length is {MAX_HASH_STRING_SIZE} bytes")


class Hash:
    """An immutable 32-byte hash value."""

    __slots__ = ("_data",)

    def __init__(self, data: bytes | bytearray | memoryview | None = None) -> None:
        if data is None:
            raw = bytes(HASH_SIZE)
        else:
            raw = bytes(memoryview(data))
        if len(raw) != HASH_SIZE:
            raise ValueError(f"invalid hash length of {len(raw)}, want {HASH_SIZE}")
        self._data = raw

    def __str__(self) -> str:
        return self._data[::-1].hex()

    def __repr__(self) -> str:
        return f"Hash('{self}')"

    def __bytes__(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return HASH_SIZE

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hash):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        return hash(self._data)

    def clone_bytes(self) -> bytes:
        """Return a copy of the raw bytes of the hash."""
        return bytes(self._data)

    def is_equal(self, target: Hash | None) -> bool:
        """Return True if ``target`` is a hash with the same bytes."""
        if target is None:
            return False
        return self._data == target._data

    def to_json(self) -> str:
        """Return the hash as a JSON string literal of its text form."""
        return json.dumps(str(self))


def hash_from_json(data: str | bytes) -> Hash:
    """Parse a JSON string literal holding a hash's text form."""
    value = json.loads(data)
    if not isinstance(value, str):
        raise ValueError("hash JSON value must be a string")
    return new_hash_from_str(value)


def new_hash(data: bytes | bytearray | memoryview) -> Hash:
    """Return a hash from exactly ``HASH_SIZE`` raw bytes."""
    return Hash(data)


def new_hash_from_str(text: str) -> Hash:
    """Return a hash from its byte-reversed hexadecimal text form."""
    return decode(text)


def decode(text: str) -> Hash:
    """Decode byte-reversed hex text into a hash.

    Missing leading characters are treated as zeros, so short strings give
    hashes whose high-order bytes are zero.
    """
    if len(text) > MAX_HASH_STRING_SIZE:
        raise HashStrSizeError()
    if len(text) % 2:
        text = "0" + text
    try:
        reversed_bytes = binascii.unhexlify(text)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ValueError(f"invalid hex in hash string {text!r}") from exc
    return Hash(reversed_bytes.rjust(HASH_SIZE, b"\x00")[::-1])


def hash_b(data: bytes) -> bytes:
    """Return SHA-256 of ``data`` as bytes."""
    return hashlib.sha256(data).digest()


def hash_h(data: bytes) -> Hash:
    """Return SHA-256 of ``data`` as a :class:`Hash`."""
    return Hash(hash_b(data))


def double_hash_b(data: bytes) -> bytes:
    """Return SHA-256 of SHA-256 of ``data`` as bytes."""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def double_hash_h(data: bytes) -> Hash:
    """Return SHA-256 of SHA-256 of ``data`` as a :class:`Hash`."""
    return Hash(double_hash_b(data))