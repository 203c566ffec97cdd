"""A manager that spreads announcements and requests over a set of peers."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Sequence

from bsvp2p.chainhash import Hash
from bsvp2p.interfaces import PeerI, PeerManagerI, PeerNetworkMismatchError
from bsvp2p.wire.varint import set_max_message_payload

__all__ = ["DEFAULT_EXCESSIVE_BLOCK_SIZE", "PeerManager"]

DEFAULT_EXCESSIVE_BLOCK_SIZE = 4_000_000_000

_POLL_INTERVAL = 0.05


class PeerManager(PeerManagerI):
    """Keeps a set of peers on one network and picks which of them to use.

    Announcements go to the first half (rounded up) of the connected peers,
    ordered by address, so the rest remain free to hear from the network.
    With ``restart_unhealthy_peers`` each added peer is watched and restarted
    whenever it reports itself unhealthy.
    """

    def __init__(
        self,
        network: int,
        *,
        logger: logging.Logger | None = None,
        batch_delay: float = 0.0,
        excessive_block_size: int = DEFAULT_EXCESSIVE_BLOCK_SIZE,
        restart_unhealthy_peers: bool = False,
    ) -> None:
        self.network = network
        self.batch_delay = batch_delay
        self.excessive_block_size = excessive_block_size
        self.restart_unhealthy_peers = restart_unhealthy_peers
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()
        self._peers: list[PeerI] = []
        self._stop = threading.Event()
        self._monitors: list[threading.Thread] = []

        self._logger.info("Excessive block size set to %d", excessive_block_size)
        set_max_message_payload(excessive_block_size)

    def add_peer(self, peer: PeerI) -> None:
        """Add ``peer``; raise :class:`PeerNetworkMismatchError` if its network differs."""
        with self._lock:
            if peer.network() != self.network:
                raise PeerNetworkMismatchError()
            self._peers.append(peer)
            if self.restart_unhealthy_peers:
                self._start_monitor_peer_health(peer)

    def get_peers(self) -> list[PeerI]:
        """Return a copy of the managed peers."""
        with self._lock:
            return list(self._peers)

    def shutdown(self) -> None:
        """Stop health monitoring and shut every peer down."""
        self._logger.info("Shutting down peer manager")
        self._stop.set()
        with self._lock:
            monitors = list(self._monitors)
            self._monitors.clear()
            peers = list(self._peers)
        for monitor in monitors:
            monitor.join()
        for peer in peers:
            peer.shutdown()

    def _start_monitor_peer_health(self, peer: PeerI) -> None:
        self._logger.info("Starting peer health monitoring")
        monitor = threading.Thread(
            target=self._monitor_peer_health,
            args=(peer,),
            name=f"peer-health-{peer}",
            daemon=True,
        )
        self._monitors.append(monitor)
        monitor.start()

    def _monitor_peer_health(self, peer: PeerI) -> None:
        signals = peer.unhealthy_queue()
        while not self._stop.is_set():
            try:
                signals.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                continue
            if self._stop.is_set():
                return
            self._logger.warning(
                "peer unhealthy - restarting (address=%s, connected=%s)",
                peer,
                peer.connected(),
            )
            peer.restart()

    def announce_transaction(
        self, tx_hash: Hash, peers: Sequence[PeerI] | None = None
    ) -> list[PeerI]:
        """Announce a transaction to ``peers``, or to the chosen peers if none are given."""
        targets = list(peers) if peers else self.get_announced_peers()
        for peer in targets:
            peer.announce_transaction(tx_hash)
        return targets

    def request_transaction(self, tx_hash: Hash) -> PeerI | None:
        """Ask the first connected chosen peer for a transaction and return it."""
        peer = self._first_connected()
        if peer is not None:
            peer.request_transaction(tx_hash)
        return peer

    def announce_block(
        self, block_hash: Hash, peers: Sequence[PeerI] | None = None
    ) -> list[PeerI]:
        """Announce a block to ``peers``, or to the chosen peers if none are given."""
        targets = list(peers) if peers else self.get_announced_peers()
        for peer in targets:
            peer.announce_block(block_hash)
        return targets

    def request_block(self, block_hash: Hash) -> PeerI | None:
        """Ask the first connected chosen peer for a block and return it."""
        peer = self._first_connected()
        if peer is not None:
            peer.request_block(block_hash)
        return peer

    def _first_connected(self) -> PeerI | None:
        return next((p for p in self.get_announced_peers() if p.connected()), None)

    def get_announced_peers(self) -> list[PeerI]:
        """Return the first half, rounded up, of the connected peers sorted by address."""
        with self._lock:
            connected = [peer for peer in self._peers if peer.connected()]
        connected.sort(key=str)
        return connected[: (len(connected) + 1) // 2]