"""Merkle tree construction over transaction hashes.

The tree is stored as a flat list: the leaves first (padded with ``None`` up
to the next power of two), then each level of parents, with the root last.
"""

from __future__ import annotations

from collections.abc import Sequence

from bsvp2p.chainhash import HASH_SIZE, double_hash_b

__all__ = ["next_power_of_two", "hash_merkle_branches", "build_merkle_tree_store"]


def next_power_of_two(n: int) -> int:
    """Return ``n`` if it is a power of two, else the next power of two above it."""
    if n & (n - 1) == 0:
        return n
    return 1 << n.bit_length()


def _node(data: bytes) -> bytes:
    return bytes(data[:HASH_SIZE]).ljust(HASH_SIZE, b"\x00")


def hash_merkle_branches(left: bytes, right: bytes) -> bytes:
    """Return the double SHA-256 of the left node followed by the right node."""
    return double_hash_b(_node(left) + _node(right))


def build_merkle_tree_store(tx_hashes: Sequence[bytes | None]) -> list[bytes | None]:
    """Build a merkle tree from leaf hashes and return it as a flat list.

    Parents with no left child are ``None``; parents with only a left child
    hash that child with itself. The root is the last element.
    """
    if not tx_hashes:
        raise ValueError("cannot build a merkle tree from no hashes")

    next_pot = next_power_of_two(len(tx_hashes))
    array_size = next_pot * 2 - 1
    merkles: list[bytes | None] = list(tx_hashes) + [None] * (array_size - len(tx_hashes))

    offset = next_pot
    for i in range(0, array_size - 1, 2):
        left, right = merkles[i], merkles[i + 1]
        if left is None:
            merkles[offset] = None
        elif right is None:
            merkles[offset] = hash_merkle_branches(left, left)
        else:
            merkles[offset] = hash_merkle_branches(left, right)
        offset += 1

    return merkles