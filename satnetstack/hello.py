"""OLSR hello protocol: neighbour discovery messages and their exchange."""

from __future__ import annotations

import logging
import struct
import threading
import time
from dataclasses import dataclass, field
from enum import IntEnum
from ipaddress import IPv4Address
from typing import Protocol

from satnetstack.iru import IruError
from satnetstack.model import ConnType, Packet
from satnetstack.synclist import SyncList
from satnetstack.table import Table

MAX_NEIGHBORS = 16
MAX_MPRS = 16
HELLO_INTERVAL_MS = 5000
TIMEOUT_NEIGHBOR_MS = 30000

HELLO_PORT = 1698
HELLO_DESTINATION = IPv4Address("10.0.0.255")

_INT = struct.Struct("<i")
_ADDR_SIZE = 4
_RECV_TIMEOUT = 0.5
_LISTEN_PAUSE = 1.0

log = logging.getLogger(__name__)


class Willingness(IntEnum):
    """How willing a node is to act as a multipoint relay."""

    NEVER = 0
    DEFAULT = 3
    ALWAYS = 7


class _Router(Protocol):
    def send(self, packet: Packet) -> None: ...

    def recv(
        self,
        proc_id: int,
        port: int,
        conn_type: ConnType = ConnType.UDP,
        timeout: float | None = None,
    ) -> Packet: ...


@dataclass
class HelloMessage:
    """A hello message listing a node's neighbours and relays."""

    neighbors: list[IPv4Address] = field(default_factory=list)
    mprs: list[IPv4Address] = field(default_factory=list)
    willingness: int = Willingness.DEFAULT

    def to_bytes(self) -> bytes:
        """Encode as neighbour count, neighbours, relay count, relays, willingness."""
        parts = [_INT.pack(len(self.neighbors))]
        parts.extend(addr.packed for addr in self.neighbors)
        parts.append(_INT.pack(len(self.mprs)))
        parts.extend(addr.packed for addr in self.mprs)
        parts.append(_INT.pack(int(self.willingness)))
        return b"".join(parts)

    @classmethod
    def from_bytes(cls, data: bytes) -> HelloMessage:
        """Decode a hello message; raise ValueError if it is malformed."""
        if len(data) <= 2 * _INT.size:
            raise ValueError("hello message buffer too small")
        view = memoryview(data)
        offset = 0

        def read_int() -> int:
            nonlocal offset
            if offset + _INT.size > len(view):
                raise ValueError("hello message truncated")
            (value,) = _INT.unpack_from(view, offset)
            offset += _INT.size
            return value

        def read_addresses(count: int) -> list[IPv4Address]:
            nonlocal offset
            if count < 0:
                raise ValueError(f"negative address count {count}")
            end = offset + count * _ADDR_SIZE
            if end > len(view):
                raise ValueError("hello message truncated")
            addresses = [
                IPv4Address(bytes(view[start:start + _ADDR_SIZE]))
                for start in range(offset, end, _ADDR_SIZE)
            ]
            offset = end
            return addresses

        neighbors = read_addresses(read_int())
        mprs = read_addresses(read_int())
        willingness = read_int()
        return cls(neighbors=neighbors, mprs=mprs, willingness=willingness)


@dataclass
class OneHopNeighbor:
    """A directly reachable node and when it was last heard."""

    last_seen: int
    willingness: int


@dataclass
class TwoHopNeighbors:
    """The one-hop neighbours through which a two-hop node is reached."""

    via_neighbors: list[int] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.via_neighbors)


class HelloService:
    """Periodically announces this node and records neighbours that announce."""

    def __init__(
        self,
        iru: _Router,
        proc_id: int,
        one_hop_neighbors: Table,
        two_hop_neighbors: Table,
        mprs: SyncList,
    ) -> None:
        self.iru = iru
        self.proc_id = proc_id
        self.one_hop_neighbors = one_hop_neighbors
        self.two_hop_neighbors = two_hop_neighbors
        self.mprs = mprs
        self._stop = threading.Event()
        self._threads: list[threading.Thread] = []

    def build_message(self) -> HelloMessage:
        """The hello message describing the current neighbourhood."""
        return HelloMessage(
            neighbors=[IPv4Address(key) for key in self.one_hop_neighbors.keys()],
            mprs=[IPv4Address(relay) for relay in self.mprs],
            willingness=Willingness.DEFAULT,
        )

    def send_once(self) -> Packet:
        """Broadcast one hello message and return the packet sent."""
        packet = Packet(
            src_addr=None,
            dest_addr=HELLO_DESTINATION,
            proto=ConnType.UDP,
            dest_port=HELLO_PORT,
            payload=self.build_message().to_bytes(),
        )
        self.iru.send(packet)
        return packet

    def handle_packet(self, packet: Packet) -> HelloMessage | None:
        """Record the sender of a hello packet; return the message, or None."""
        if packet.src_addr is None:
            log.error("hello packet without source address")
            return None
        try:
            msg = HelloMessage.from_bytes(packet.payload)
        except ValueError as exc:
            log.error("failed to decode hello message: %s", exc)
            return None
        key = int(packet.src_addr)
        neighbor = OneHopNeighbor(last_seen=int(time.time()), willingness=msg.willingness)
        if key in self.one_hop_neighbors:
            self.one_hop_neighbors.update(key, neighbor)
        else:
            self.one_hop_neighbors.insert(key, neighbor)
        return msg

    def _send_loop(self) -> None:
        while not self._stop.is_set():
            try:
                self.send_once()
            except (IruError, OSError) as exc:
                log.error("failed to send hello: %s", exc)
            self._stop.wait(HELLO_INTERVAL_MS / 1000)

    def _listen_loop(self) -> None:
        while not self._stop.is_set():
            try:
                packet = self.iru.recv(
                    self.proc_id, HELLO_PORT, ConnType.UDP, timeout=_RECV_TIMEOUT
                )
            except TimeoutError:
                continue
            except (IruError, OSError) as exc:
                log.error("failed to receive hello: %s", exc)
                self._stop.wait(_LISTEN_PAUSE)
                continue
            self.handle_packet(packet)
            self._stop.wait(_LISTEN_PAUSE)

    def start(self) -> None:
        """Start the sending and listening threads."""
        if self._threads:
            return
        self._stop.clear()
        self._threads = [
            threading.Thread(target=self._listen_loop, name="hello-listen", daemon=True),
            threading.Thread(target=self._send_loop, name="hello-send", daemon=True),
        ]
        for thread in self._threads:
            thread.start()

    def stop(self) -> None:
        """Stop both threads and wait for them to finish."""
        self._stop.set()
        for thread in self._threads:
            thread.join()
        self._threads = []