"""Inventory vectors: a type tag and a hash naming a transaction or block."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Protocol

from bsvp2p.chainhash import HASH_SIZE, Hash
from bsvp2p.wire.elements import read_hash, read_uint32, write_hash, write_uint32

__all__ = [
    "MAX_INV_PER_MSG",
    "MAX_INV_VECT_PAYLOAD",
    "InvType",
    "InvVect",
    "inv_type_string",
    "read_inv_vect",
    "write_inv_vect",
]


class _Reader(Protocol):
    def read(self, size: int, /) -> bytes: ...


class _Writer(Protocol):
    def write(self, data: bytes, /) -> int | None: ...


MAX_INV_PER_MSG = 50000
"""The largest number of inventory vectors a single inv message may hold."""

MAX_INV_VECT_PAYLOAD = 4 + HASH_SIZE


class InvType(enum.IntEnum):
    """The kinds of data an inventory vector can refer to."""

    ERROR = 0
    TX = 1
    BLOCK = 2
    FILTERED_BLOCK = 3

    def __str__(self) -> str:
        return _INV_STRINGS[self]


_INV_STRINGS = {
    InvType.ERROR: "ERROR",
    InvType.TX: "MSG_TX",
    InvType.BLOCK: "MSG_BLOCK",
    InvType.FILTERED_BLOCK: "MSG_FILTERED_BLOCK",
}


def _as_inv_type(value: int) -> InvType | int:
    try:
        return InvType(value)
    except ValueError:
        return value


def inv_type_string(value: int) -> str:
    """Return the protocol name of an inventory type, known or not."""
    known = _as_inv_type(value)
    if isinstance(known, InvType):
        return _INV_STRINGS[known]
    return f"Unknown InvType ({value})"


@dataclass
class InvVect:
    """An inventory vector.

    ``type`` is an :class:`InvType` when the value is known and a plain
    integer otherwise.
    """

    type: InvType | int = InvType.ERROR
    hash: Hash = field(default_factory=Hash)


def read_inv_vect(reader: _Reader, pver: int = 0) -> InvVect:
    """Read an inventory vector from ``reader``."""
    inv_type = _as_inv_type(read_uint32(reader))
    return InvVect(inv_type, read_hash(reader))


def write_inv_vect(writer: _Writer, pver: int, inv_vect: InvVect) -> None:
    """Write ``inv_vect`` to ``writer``."""
    write_uint32(writer, int(inv_vect.type))
    write_hash(writer, inv_vect.hash)