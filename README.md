# bsvp2p

Building blocks for working with the Bitcoin SV peer-to-peer protocol:
chain hashes, merkle trees, the encoding of primitive wire elements, block
headers, inventory vectors and a manager that spreads announcements and
requests over a set of peers. There are no dependencies beyond the
standard library.

## Modules

- `bsvp2p.chainhash`: the immutable 32-byte `Hash`. `str(h)` gives the
  byte-reversed hex form, `bytes(h)` the raw bytes. Hashes compare by value
  and can be used as dictionary keys. `to_json()` and `hash_from_json()`
  convert to and from a JSON string. The constructors are `new_hash` (from
  raw bytes) and `new_hash_from_str` / `decode` (from hex text; short text
  is zero-padded). Text longer than 64 characters raises
  `HashStrSizeError`, and invalid hex raises `ValueError`. The SHA-256
  helpers are `hash_b`, `hash_h`, `double_hash_b` and `double_hash_h`.
- `bsvp2p.merkle`: `build_merkle_tree_store` lays out a merkle tree as a
  flat list. The leaves come first, padded with `None` up to a power of two,
  and the root comes last. Also provides `hash_merkle_branches` and
  `next_power_of_two`.
- `bsvp2p.wire.error`: `MessageError`, raised for malformed or
  out-of-limit data. Plain end of stream is raised as `EOFError` instead.
- `bsvp2p.wire.elements`: little-endian readers and writers for integers
  (`read_uint8` … `read_int64`, `write_uint8` … `write_int64`), booleans and
  hashes, plus `read_full` and `random_uint64`. A stream that ends before
  anything is read raises `EOFError`. A stream that ends part way through an
  element raises `UnexpectedEOFError`. A short write raises `OSError`.
- `bsvp2p.wire.varint`: variable length integers (`read_var_int`,
  `write_var_int`, `var_int_serialize_size`), strings and byte arrays.
  Non-canonical integers and oversized lengths raise `MessageError`. String
  lengths are checked against `max_message_payload()`, which you can change
  with `set_max_message_payload()`.
- `bsvp2p.wire.blockheader`: the `BlockHeader` dataclass with its 80-byte
  encoding (`to_bytes`, `from_bytes`, `serialize`, `bsv_encode`,
  `read_block_header`, `write_block_header`, `deserialize_block_header`) and
  `block_hash()`. `new_block_header` stamps a header with the current time.
- `bsvp2p.wire.invvect`: the `InvType` enum, the `InvVect` dataclass,
  `read_inv_vect` / `write_inv_vect` and `inv_type_string`.
- `bsvp2p.block_message`: `BlockMessage`, a block reduced to its header,
  height, size and transaction hashes.
- `bsvp2p.interfaces`: the abstract contracts `PeerI`, `PeerHandlerI` and
  `PeerManagerI`, and `PeerNetworkMismatchError`.
- `bsvp2p.peer_manager`: `PeerManager`, described below.

## Examples

Hashes:

```python
from bsvp2p.chainhash import double_hash_h, new_hash_from_str

h = double_hash_h(b"abc")
same = new_hash_from_str(str(h))
assert same == h
```

Merkle root:

```python
from bsvp2p.chainhash import double_hash_b
from bsvp2p.merkle import build_merkle_tree_store

leaves = [double_hash_b(data) for data in (b"tx1", b"tx2", b"tx3")]
tree = build_merkle_tree_store(leaves)
root = tree[-1]
```

Variable length integers:

```python
import io
from bsvp2p.wire.varint import read_var_int, write_var_int

buf = io.BytesIO()
write_var_int(buf, 0, 0xfd)
buf.seek(0)
assert read_var_int(buf, 0) == 0xfd
```

Block headers:

```python
from bsvp2p.wire.blockheader import BlockHeader

header = BlockHeader(version=1, bits=0x1d00ffff, nonce=123123)
data = header.to_bytes()          # 80 bytes
assert BlockHeader.from_bytes(data) == header
print(header.block_hash())
```

## Peer management

`PeerManager(network, *, logger=None, batch_delay=0.0,
excessive_block_size=4_000_000_000, restart_unhealthy_peers=False)` keeps a
set of peers on one network.

- Creating a manager sets the wire module's maximum message payload to
  `excessive_block_size`.
- `add_peer(peer)` raises `PeerNetworkMismatchError` when
  `peer.network()` differs from the manager's network.
- `get_announced_peers()` sorts the connected peers by `str(peer)` and
  returns the first half, rounded up.
- `announce_transaction(tx_hash, peers=None)` and
  `announce_block(block_hash, peers=None)` send to the given peers. If none
  are given, they send to the announced peers. Both return the peers that
  were used.
- `request_transaction` and `request_block` ask the first connected
  announced peer. They return that peer, or `None` if no peer is connected.
- With `restart_unhealthy_peers=True`, a background thread watches each
  peer's `unhealthy_queue()` and calls `restart()` whenever an item arrives.
- `shutdown()` stops the monitoring threads and shuts every peer down.

```python
from bsvp2p.peer_manager import PeerManager

manager = PeerManager(network)
manager.add_peer(peer)            # any implementation of bsvp2p.interfaces.PeerI
announced_to = manager.announce_transaction(tx_hash)
```

## What this package does not do

This package has no peer implementation. It does not open TCP
connections, perform the version/verack handshake or frame, read and write
complete protocol messages such as version, inv, getdata, tx, block, ping or
reject. To manage peers, you provide your own `PeerI` and `PeerHandlerI`
implementations. The package also has no command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```