import io
from datetime import datetime, timezone

import pytest

from bsvp2p.chainhash import Hash, new_hash_from_str
from bsvp2p.wire.blockheader import (
    BLOCK_HEADER_LEN,
    BlockHeader,
    deserialize_block_header,
    new_block_header,
    read_block_header,
    write_block_header,
)
from bsvp2p.wire.elements import UnexpectedEOFError, random_uint64

MAIN_NET_GENESIS_HASH = Hash(
    bytes(
        [
            0x6F, 0xE2, 0x8C, 0x0A, 0xB6, 0xF1, 0xB3, 0x72,
            0xC1, 0xA6, 0xA2, 0x46, 0xAE, 0x63, 0xF7, 0x4F,
            0x93, 0x1E, 0x83, 0x65, 0xE1, 0x5A, 0x08, 0x9C,
            0x68, 0xD6, 0x19, 0x00, 0x00, 0x00, 0x00, 0x00,
        ]
    )
)

MAIN_NET_GENESIS_MERKLE_ROOT = Hash(
    bytes(
        [
            0x3B, 0xA3, 0xED, 0xFD, 0x7A, 0x7B, 0x12, 0xB2,
            0x7A, 0xC7, 0x2C, 0x3E, 0x67, 0x76, 0x8F, 0x61,
            0x7F, 0xC8, 0x1B, 0xC3, 0x88, 0x8A, 0x51, 0x32,
            0x3A, 0x9F, 0xB8, 0xAA, 0x4B, 0x1E, 0x5E, 0x4A,
        ]
    )
)

BASE_ENCODED = bytes(
    [
        0x01, 0x00, 0x00, 0x00,
        0x6F, 0xE2, 0x8C, 0x0A, 0xB6, 0xF1, 0xB3, 0x72,
        0xC1, 0xA6, 0xA2, 0x46, 0xAE, 0x63, 0xF7, 0x4F,
        0x93, 0x1E, 0x83, 0x65, 0xE1, 0x5A, 0x08, 0x9C,
        0x68, 0xD6, 0x19, 0x00, 0x00, 0x00, 0x00, 0x00,
        0x3B, 0xA3, 0xED, 0xFD, 0x7A, 0x7B, 0x12, 0xB2,
        0x7A, 0xC7, 0x2C, 0x3E, 0x67, 0x76, 0x8F, 0x61,
        0x7F, 0xC8, 0x1B, 0xC3, 0x88, 0x8A, 0x51, 0x32,
        0x3A, 0x9F, 0xB8, 0xAA, 0x4B, 0x1E, 0x5E, 0x4A,
        0x29, 0xAB, 0x5F, 0x49,
        0xFF, 0xFF, 0x00, 0x1D,
        0xF3, 0xE0, 0x01, 0x00,
    ]
)


def base_header() -> BlockHeader:
    return BlockHeader(
        version=1,
        prev_block=MAIN_NET_GENESIS_HASH,
        merkle_root=MAIN_NET_GENESIS_MERKLE_ROOT,
        timestamp=datetime.fromtimestamp(0x495FAB29, timezone.utc),
        bits=0x1D00FFFF,
        nonce=123123,
    )


def test_new_block_header_keeps_fields():
    nonce = random_uint64() & 0xFFFFFFFF
    bits = 0x1D00FFFF
    bh = new_block_header(1, MAIN_NET_GENESIS_HASH, MAIN_NET_GENESIS_MERKLE_ROOT, bits, nonce)
    assert bh.prev_block.is_equal(MAIN_NET_GENESIS_HASH)
    assert bh.merkle_root.is_equal(MAIN_NET_GENESIS_MERKLE_ROOT)
    assert bh.bits == bits
    assert bh.nonce == nonce
    assert bh.version == 1
    assert bh.timestamp.microsecond == 0


@pytest.mark.parametrize("pver", [70013, 60002, 60000, 31402, 209])
def test_block_header_wire(pver):
    header = base_header()

    buf = io.BytesIO()
    write_block_header(buf, pver, header)
    assert buf.getvalue() == BASE_ENCODED

    buf = io.BytesIO()
    header.bsv_encode(buf, 70001, 0)
    assert buf.getvalue() == BASE_ENCODED

    decoded = read_block_header(io.BytesIO(BASE_ENCODED), pver)
    assert decoded == header


def test_block_header_serialize():
    header = base_header()
    buf = io.BytesIO()
    header.serialize(buf)
    assert buf.getvalue() == BASE_ENCODED
    assert deserialize_block_header(io.BytesIO(BASE_ENCODED)) == header


def test_to_bytes_and_from_bytes_round_trip():
    header = base_header()
    data = header.to_bytes()
    assert len(data) == BLOCK_HEADER_LEN
    assert data == BASE_ENCODED
    assert BlockHeader.from_bytes(data) == header


def test_genesis_block_hash():
    genesis = BlockHeader(
        version=1,
        prev_block=Hash(),
        merkle_root=MAIN_NET_GENESIS_MERKLE_ROOT,
        timestamp=datetime.fromtimestamp(0x495FAB29, timezone.utc),
        bits=0x1D00FFFF,
        nonce=2083236893,
    )
    assert genesis.block_hash() == MAIN_NET_GENESIS_HASH
    assert str(genesis.block_hash()) == (
        "000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f"
    )


def test_naive_timestamp_is_taken_as_utc():
    header = base_header()
    header.timestamp = datetime(2009, 1, 3, 18, 15, 5)
    assert header.to_bytes() == BASE_ENCODED


def test_read_truncated_header_raises():
    with pytest.raises(UnexpectedEOFError):
        read_block_header(io.BytesIO(BASE_ENCODED[:40]))


def test_read_empty_header_raises_eof():
    with pytest.raises(EOFError):
        read_block_header(io.BytesIO(b""))


def test_header_with_parsed_hash_round_trips():
    prev = new_hash_from_str("3264bc2ac36a60840790ba1d475d01367e7c723da941069e9dc")
    header = BlockHeader(version=2, prev_block=prev, bits=7, nonce=9)
    assert BlockHeader.from_bytes(header.to_bytes()) == header