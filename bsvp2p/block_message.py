"""A received block reduced to its header and transaction ids."""

from __future__ import annotations

from dataclasses import dataclass, field

from bsvp2p.chainhash import Hash
from bsvp2p.wire.blockheader import BlockHeader

__all__ = ["BlockMessage"]


@dataclass
class BlockMessage:
    """A block message that keeps only the transaction hashes, not the transactions."""

    header: BlockHeader | None = None
    height: int = 0
    transaction_hashes: list[Hash] = field(default_factory=list)
    size: int = 0

    def command(self) -> str:
        """Return the protocol command name of the message."""
        return "block"