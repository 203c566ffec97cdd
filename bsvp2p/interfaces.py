"""The contracts between peers, the handlers they report to and the peer manager."""

from __future__ import annotations

import queue
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from bsvp2p.chainhash import Hash
from bsvp2p.wire.invvect import InvVect

__all__ = [
    "PeerNetworkMismatchError",
    "PeerI",
    "PeerHandlerI",
    "PeerManagerI",
]


class PeerNetworkMismatchError(ValueError):
    """Raised when a peer on one network is added to a manager for another."""

    def __init__(self, message: str = "peer network mismatch") -> None:
        super().__init__(message)


class PeerI(ABC):
    """A connection to one node of the network."""

    @abstractmethod
    def connected(self) -> bool:
        """Return True once the handshake is done and messages can be sent."""

    @abstractmethod
    def write_msg(self, msg: Any) -> None:
        """Queue ``msg`` to be sent to the node."""

    @abstractmethod
    def __str__(self) -> str:
        """Return the address of the node."""

    @abstractmethod
    def announce_transaction(self, tx_hash: Hash) -> None:
        """Tell the node about a transaction."""

    @abstractmethod
    def request_transaction(self, tx_hash: Hash) -> None:
        """Ask the node for a transaction."""

    @abstractmethod
    def announce_block(self, block_hash: Hash) -> None:
        """Tell the node about a block."""

    @abstractmethod
    def request_block(self, block_hash: Hash) -> None:
        """Ask the node for a block."""

    @abstractmethod
    def network(self) -> int:
        """Return the magic number of the network the peer belongs to."""

    @abstractmethod
    def is_healthy(self) -> bool:
        """Return True while the node keeps answering pings."""

    @abstractmethod
    def unhealthy_queue(self) -> queue.Queue[None]:
        """Return the queue that receives an item each time the peer turns unhealthy."""

    @abstractmethod
    def shutdown(self) -> None:
        """Stop all work of the peer and close its connection."""

    @abstractmethod
    def restart(self) -> None:
        """Shut the peer down and start it again."""


class PeerHandlerI(ABC):
    """Receives what a peer hears from its node and answers its requests.

    Each method may raise to report a failure; the peer logs it and goes on.
    """

    @abstractmethod
    def handle_transactions_get(
        self, msgs: Sequence[InvVect], peer: PeerI
    ) -> list[bytes | None]:
        """Return the raw bytes of the requested transactions, None for unknown ones."""

    @abstractmethod
    def handle_transaction_sent(self, msg: Any, peer: PeerI) -> None:
        """Note that a transaction was sent to the node."""

    @abstractmethod
    def handle_transaction_announcement(self, msg: InvVect, peer: PeerI) -> None:
        """Note that the node announced a transaction."""

    @abstractmethod
    def handle_transaction_rejection(self, rej_msg: Any, peer: PeerI) -> None:
        """Note that the node rejected something."""

    @abstractmethod
    def handle_transaction(self, msg: Any, peer: PeerI) -> None:
        """Take a transaction received from the node."""

    @abstractmethod
    def handle_block_announcement(self, msg: InvVect, peer: PeerI) -> None:
        """Note that the node announced a block."""

    @abstractmethod
    def handle_block(self, msg: Any, peer: PeerI) -> None:
        """Take a block received from the node."""


class PeerManagerI(ABC):
    """Spreads announcements and requests over a set of peers."""

    @abstractmethod
    def announce_transaction(
        self, tx_hash: Hash, peers: Sequence[PeerI] | None = None
    ) -> list[PeerI]:
        """Announce a transaction and return the peers it went to."""

    @abstractmethod
    def request_transaction(self, tx_hash: Hash) -> PeerI | None:
        """Request a transaction and return the peer asked, if any."""

    @abstractmethod
    def announce_block(
        self, block_hash: Hash, peers: Sequence[PeerI] | None = None
    ) -> list[PeerI]:
        """Announce a block and return the peers it went to."""

    @abstractmethod
    def request_block(self, block_hash: Hash) -> PeerI | None:
        """Request a block and return the peer asked, if any."""

    @abstractmethod
    def add_peer(self, peer: PeerI) -> None:
        """Add a peer to the managed set."""

    @abstractmethod
    def get_peers(self) -> list[PeerI]:
        """Return a copy of the managed peers."""

    @abstractmethod
    def shutdown(self) -> None:
        """Stop the manager and all its peers."""