"""OLSR node: owns the neighbourhood state and runs the hello protocol."""

from __future__ import annotations

from satnetstack.hello import HelloService
from satnetstack.iru import Iru
from satnetstack.synclist import SyncList
from satnetstack.table import Table


class OlsrNode:
    """Optimized link state routing on top of the internal router unit."""

    def __init__(self, iru: Iru) -> None:
        self.iru = iru
        self.is_mpr = False
        self.one_hop_neighbors = Table()
        self.two_hop_neighbors = Table()
        self.mprs = SyncList()
        self.mpr_selectors = SyncList()
        self.hello: HelloService | None = None

    def start(self) -> None:
        """Register with the router unit and start the hello protocol."""
        if self.hello is not None:
            return
        proc_id = self.iru.register_process()
        self.hello = HelloService(
            self.iru, proc_id, self.one_hop_neighbors, self.two_hop_neighbors, self.mprs
        )
        self.hello.start()

    def stop(self) -> None:
        """Stop the hello protocol if it is running."""
        if self.hello is not None:
            self.hello.stop()
            self.hello = None