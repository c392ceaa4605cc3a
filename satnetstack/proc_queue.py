"""Registry of processes and the ports they listen on."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from satnetstack.model import Packet


class ProcQueueError(LookupError):
    """Raised when a process or listener cannot be found."""


class Listener:
    """A port a process waits on; one received packet is handed over."""

    def __init__(self, port: int) -> None:
        self.port = port
        self.recv_packet: Packet | None = None
        self._cond = threading.Condition()

    def deliver(self, packet: Packet) -> None:
        """Hand a packet to the listener and wake anyone waiting on it."""
        with self._cond:
            self.recv_packet = packet
            self._cond.notify_all()

    def wait(self, timeout: float | None = None) -> Packet:
        """Block until a packet is delivered; raise TimeoutError on timeout."""
        with self._cond:
            if not self._cond.wait_for(lambda: self.recv_packet is not None, timeout):
                raise TimeoutError(f"no packet received on port {self.port}")
            assert self.recv_packet is not None
            return self.recv_packet


@dataclass
class Process:
    """A registered process and its listeners, most recent first."""

    id: int
    listeners: list[Listener] = field(default_factory=list)


class ProcQueue:
    """Thread-safe collection of registered processes, most recent first."""

    def __init__(self) -> None:
        self._processes: list[Process] = []
        self._lock = threading.RLock()

    def add_process(self, proc_id: int) -> Process:
        """Register a process and return it."""
        proc = Process(proc_id)
        with self._lock:
            self._processes.insert(0, proc)
        return proc

    def remove_process(self, proc_id: int) -> None:
        """Remove a process and all its listeners."""
        with self._lock:
            proc = self.get_process(proc_id)
            if proc is None:
                raise ProcQueueError(f"process {proc_id} not found")
            self._processes.remove(proc)

    def add_listener(self, proc_id: int, port: int) -> Listener:
        """Attach a new listener on ``port`` to a process and return it."""
        with self._lock:
            proc = self.get_process(proc_id)
            if proc is None:
                raise ProcQueueError(f"process {proc_id} not found")
            listener = Listener(port)
            proc.listeners.insert(0, listener)
            return listener

    def remove_listener(self, proc_id: int, port: int) -> None:
        """Detach the most recent listener on ``port`` from a process."""
        with self._lock:
            listener = self.get_listener(proc_id, port)
            if listener is None:
                raise ProcQueueError(f"no listener on port {port} for process {proc_id}")
            proc = self.get_process(proc_id)
            assert proc is not None
            proc.listeners.remove(listener)

    def get_listener(self, proc_id: int, port: int) -> Listener | None:
        """Return the most recent listener on ``port`` for a process, or None."""
        with self._lock:
            proc = self.get_process(proc_id)
            if proc is None:
                return None
            return next((l for l in proc.listeners if l.port == port), None)

    def get_process(self, proc_id: int) -> Process | None:
        """Return the process with ``proc_id``, or None."""
        with self._lock:
            return next((p for p in self._processes if p.id == proc_id), None)

    def __len__(self) -> int:
        return len(self._processes)