"""Block headers and their 80-byte wire encoding.

A header is written as the version (signed 32-bit), the previous block hash,
the merkle root, the timestamp as unsigned 32-bit unix seconds, the
difficulty bits and the nonce, all little-endian. The double SHA-256 of
those 80 bytes identifies the block.
"""

from __future__ import annotations

import io
import math
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

from bsvp2p.chainhash import HASH_SIZE, Hash, double_hash_h
from bsvp2p.wire.elements import (
    read_hash,
    read_int32,
    read_uint32,
    write_hash,
    write_int32,
    write_uint32,
)

__all__ = [
    "MAX_BLOCK_HEADER_PAYLOAD",
    "BLOCK_HEADER_LEN",
    "BlockHeader",
    "new_block_header",
    "read_block_header",
    "write_block_header",
    "deserialize_block_header",
]


class _Reader(Protocol):
    def read(self, size: int, /) -> bytes: ...


class _Writer(Protocol):
    def write(self, data: bytes, /) -> int | None: ...


MAX_BLOCK_HEADER_PAYLOAD = 16 + HASH_SIZE * 2
"""The largest number of bytes a block header takes on the wire."""

BLOCK_HEADER_LEN = 80

_EPOCH = datetime.fromtimestamp(0, timezone.utc)


def _unix_seconds(timestamp: datetime) -> int:
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    seconds = math.floor((timestamp - _EPOCH).total_seconds())
    return seconds & 0xFFFFFFFF


@dataclass
class BlockHeader:
    """The header of a block.

    The timestamp only travels as whole seconds in an unsigned 32-bit field,
    so anything finer is lost and dates past 2106 wrap around.
    """

    version: int = 0
    prev_block: Hash = field(default_factory=Hash)
    merkle_root: Hash = field(default_factory=Hash)
    timestamp: datetime = _EPOCH
    bits: int = 0
    nonce: int = 0

    def block_hash(self) -> Hash:
        """Return the double SHA-256 of the encoded header."""
        return double_hash_h(self.to_bytes())

    def bsv_encode(self, writer: _Writer, pver: int = 0, enc: int = 0) -> None:
        """Write the header to ``writer`` in wire form."""
        write_block_header(writer, pver, self)

    def serialize(self, writer: _Writer) -> None:
        """Write the header in the storage form, identical to the wire form."""
        write_block_header(writer, 0, self)

    def to_bytes(self) -> bytes:
        """Return the 80 encoded bytes of the header."""
        buf = io.BytesIO()
        write_block_header(buf, 0, self)
        return buf.getvalue()

    @classmethod
    def from_bytes(cls, data: bytes) -> BlockHeader:
        """Decode a header from its encoded bytes."""
        return read_block_header(io.BytesIO(data), 0)


def new_block_header(
    version: int, prev_hash: Hash, merkle_root: Hash, bits: int, nonce: int
) -> BlockHeader:
    """Return a header stamped with the current time to the second."""
    return BlockHeader(
        version=version,
        prev_block=prev_hash,
        merkle_root=merkle_root,
        timestamp=datetime.fromtimestamp(int(time.time()), timezone.utc),
        bits=bits,
        nonce=nonce,
    )


def read_block_header(reader: _Reader, pver: int = 0) -> BlockHeader:
    """Read a block header from ``reader``."""
    version = read_int32(reader)
    prev_block = read_hash(reader)
    merkle_root = read_hash(reader)
    timestamp = datetime.fromtimestamp(read_uint32(reader), timezone.utc)
    bits = read_uint32(reader)
    nonce = read_uint32(reader)
    return BlockHeader(version, prev_block, merkle_root, timestamp, bits, nonce)


def write_block_header(writer: _Writer, pver: int, header: BlockHeader) -> None:
    """Write ``header`` to ``writer``."""
    write_int32(writer, header.version)
    write_hash(writer, header.prev_block)
    write_hash(writer, header.merkle_root)
    write_uint32(writer, _unix_seconds(header.timestamp))
    write_uint32(writer, header.bits)
    write_uint32(writer, header.nonce)


def deserialize_block_header(reader: _Reader) -> BlockHeader:
    """Read a header in the storage form, identical to the wire form."""
    return read_block_header(reader, 0)