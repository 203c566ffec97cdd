import io

import pytest

from bsvp2p.chainhash import Hash
from bsvp2p.wire import elements
from bsvp2p.wire.elements import UnexpectedEOFError

HASH_BYTES = bytes(range(1, 33))


class FixedWriter:
    """Writer that accepts at most ``limit`` bytes in total."""

    def __init__(self, limit):
        self.limit = limit
        self.data = bytearray()

    def write(self, data):
        room = self.limit - len(self.data)
        accepted = data[:max(room, 0)]
        self.data += accepted
        return len(accepted)


def fixed_reader(limit, data=b""):
    return io.BytesIO(data[:limit])


def test_int32_wire():
    buf = io.BytesIO()
    elements.write_int32(buf, 1)
    assert buf.getvalue() == bytes([0x01, 0x00, 0x00, 0x00])
    assert elements.read_int32(io.BytesIO(buf.getvalue())) == 1


@pytest.mark.parametrize(
    "value, encoded",
    [
        (256, bytes([0x00, 0x01, 0x00, 0x00])),
        # inventory type tx
        (1, bytes([0x01, 0x00, 0x00, 0x00])),
        # main network magic
        (0xE8F3E1E3, bytes([0xE3, 0xE1, 0xF3, 0xE8])),
    ],
)
def test_uint32_wire(value, encoded):
    buf = io.BytesIO()
    elements.write_uint32(buf, value)
    assert buf.getvalue() == encoded
    assert elements.read_uint32(io.BytesIO(encoded)) == value


def test_int64_wire():
    encoded = bytes([0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x00, 0x00])
    buf = io.BytesIO()
    elements.write_int64(buf, 65536)
    assert buf.getvalue() == encoded
    assert elements.read_int64(io.BytesIO(encoded)) == 65536


@pytest.mark.parametrize(
    "value, encoded",
    [
        (4294967296, bytes([0x00, 0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00])),
        # service flag SFNodeNetwork
        (1, bytes([0x01, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00])),
    ],
)
def test_uint64_wire(value, encoded):
    buf = io.BytesIO()
    elements.write_uint64(buf, value)
    assert buf.getvalue() == encoded
    assert elements.read_uint64(io.BytesIO(encoded)) == value


@pytest.mark.parametrize("value, encoded", [(True, bytes([0x01])), (False, bytes([0x00]))])
def test_bool_wire(value, encoded):
    buf = io.BytesIO()
    elements.write_bool(buf, value)
    assert buf.getvalue() == encoded
    assert elements.read_bool(io.BytesIO(encoded)) is value


def test_hash_wire():
    buf = io.BytesIO()
    elements.write_hash(buf, Hash(HASH_BYTES))
    assert buf.getvalue() == HASH_BYTES
    assert elements.read_hash(io.BytesIO(HASH_BYTES)) == Hash(HASH_BYTES)


@pytest.mark.parametrize(
    "raw",
    [
        bytes([0x01, 0x02, 0x03, 0x04]),
        bytes(range(1, 13)),
        bytes(range(1, 17)),
    ],
)
def test_fixed_byte_arrays_read_back(raw):
    assert elements.read_full(io.BytesIO(raw), len(raw)) == raw


def test_int32_wire_errors():
    with pytest.raises(OSError, match="short write"):
        elements.write_int32(FixedWriter(0), 1)
    with pytest.raises(EOFError) as info:
        elements.read_int32(fixed_reader(0))
    assert not isinstance(info.value, UnexpectedEOFError)


def test_uint32_wire_errors():
    with pytest.raises(OSError, match="short write"):
        elements.write_uint32(FixedWriter(0), 256)
    with pytest.raises(EOFError) as info:
        elements.read_uint32(fixed_reader(0))
    assert not isinstance(info.value, UnexpectedEOFError)


def test_int64_wire_errors():
    with pytest.raises(OSError, match="short write"):
        elements.write_int64(FixedWriter(0), 65536)
    with pytest.raises(EOFError) as info:
        elements.read_int64(fixed_reader(0))
    assert not isinstance(info.value, UnexpectedEOFError)


def test_uint64_wire_errors():
    with pytest.raises(OSError, match="short write"):
        elements.write_uint64(FixedWriter(0), 1)
    with pytest.raises(EOFError) as info:
        elements.read_uint64(fixed_reader(0))
    assert not isinstance(info.value, UnexpectedEOFError)


def test_bool_wire_errors():
    with pytest.raises(OSError, match="short write"):
        elements.write_bool(FixedWriter(0), True)
    with pytest.raises(EOFError) as info:
        elements.read_bool(fixed_reader(0))
    assert not isinstance(info.value, UnexpectedEOFError)


def test_hash_wire_errors():
    with pytest.raises(OSError, match="short write"):
        elements.write_hash(FixedWriter(0), Hash(HASH_BYTES))
    with pytest.raises(EOFError) as info:
        elements.read_hash(fixed_reader(0))
    assert not isinstance(info.value, UnexpectedEOFError)


def test_partial_read_is_unexpected_eof():
    with pytest.raises(UnexpectedEOFError):
        elements.read_uint32(io.BytesIO(b"\x01\x02"))


def test_read_full_zero_size():
    assert elements.read_full(io.BytesIO(b""), 0) == b""


def test_read_full_collects_short_chunks():
    class Trickle:
        def __init__(self, data):
            self.data = data

        def read(self, n):
            chunk, self.data = self.data[:1], self.data[1:]
            return chunk

    assert elements.read_full(Trickle(b"abcd"), 4) == b"abcd"


def test_read_bool_nonzero_is_true():
    assert elements.read_bool(io.BytesIO(b"\x02")) is True


def test_signed_values_round_trip():
    buf = io.BytesIO()
    elements.write_int32(buf, -1)
    elements.write_int64(buf, -2)
    assert buf.getvalue()[:4] == b"\xff\xff\xff\xff"
    buf.seek(0)
    assert elements.read_int32(buf) == -1
    assert elements.read_int64(buf) == -2


def test_out_of_range_value_rejected():
    with pytest.raises(ValueError):
        elements.write_uint8(io.BytesIO(), 256)


def test_small_widths_round_trip():
    buf = io.BytesIO()
    elements.write_uint8(buf, 0xFC)
    elements.write_uint16(buf, 0xFFFF)
    assert buf.getvalue() == bytes([0xFC, 0xFF, 0xFF])
    buf.seek(0)
    assert elements.read_uint8(buf) == 0xFC
    assert elements.read_uint16(buf) == 0xFFFF


def test_random_uint64_distribution():
    tries = 1 << 8
    watermark = 1 << 56
    max_hits = 5
    hits = sum(1 for _ in range(tries) if elements.random_uint64() < watermark)
    assert hits <= max_hits


def test_random_uint64_is_big_endian_from_reader():
    data = bytes([0, 0, 0, 0, 0, 0, 0x01, 0x00])
    assert elements.random_uint64(io.BytesIO(data)) == 256


def test_random_uint64_short_read():
    class FakeRandReader:
        def __init__(self):
            self.calls = 0

        def read(self, n):
            self.calls += 1
            return b"\x01\x02" if self.calls == 1 else b""

    with pytest.raises(UnexpectedEOFError):
        elements.random_uint64(FakeRandReader())