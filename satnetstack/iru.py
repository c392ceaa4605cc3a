"""Internal router unit: registers processes, sends and receives packets."""

from __future__ import annotations

import contextlib
import logging
import random
import socket
import threading
import time
from ipaddress import IPv4Address

from satnetstack.addressing import InterfaceConfig, NetifError, interface_config
from satnetstack.filter import filter_packet
from satnetstack.model import ConnType, Packet
from satnetstack.proc_queue import ProcQueue, ProcQueueError
from satnetstack.udp_comm import (
    PacketFormatError,
    deserialize_packet,
    open_receiver,
    open_sender,
    send_packet,
)

STACK_ADDRESS = "192.168.1.2"
STACK_PREFIXLEN = 24

_RECV_BUFFER = 65535
_POLL_INTERVAL = 0.1

log = logging.getLogger(__name__)


class IruError(Exception):
    """Raised when the router unit cannot perform an operation."""


class Iru:
    """Routes packets between local processes and other nanosats."""

    def __init__(
        self, source_ip: str | IPv4Address, sender: socket.socket | None = None
    ) -> None:
        self.source_ip = IPv4Address(source_ip)
        try:
            self.interface: InterfaceConfig = interface_config(
                STACK_ADDRESS, STACK_PREFIXLEN
            )
        except NetifError as exc:
            raise IruError("network initialization failed") from exc
        self.proc_queue = ProcQueue()
        self._owns_sender = sender is None
        try:
            self._sender = open_sender() if sender is None else sender
        except OSError as exc:
            raise IruError("failed to open the sending socket") from exc
        self._send_lock = threading.Lock()
        self._receivers: set[threading.Event] = set()
        self._receivers_lock = threading.Lock()

    def register_process(self) -> int:
        """Register a new process and return its identifier."""
        proc_id = int(time.time()) ^ random.getrandbits(31)
        self.proc_queue.add_process(proc_id)
        return proc_id

    def next_hop(self, packet: Packet) -> IPv4Address | None:
        """Address of the next hop towards the packet's destination."""
        return packet.dest_addr

    def send(self, packet: Packet) -> None:
        """Send a packet to its next hop, filling in next hop and source."""
        with self._send_lock:
            packet.next_hop_addr = self.next_hop(packet)
            if packet.src_addr is None:
                packet.src_addr = self.source_ip
            if self._sender is None:
                raise IruError("no sending socket")
            if packet.next_hop_addr is None:
                raise IruError("packet has no destination")
            try:
                send_packet(
                    self._sender, packet, packet.next_hop_addr, packet.dest_port
                )
            except (PacketFormatError, OSError) as exc:
                raise IruError("failed to send packet") from exc

    def handle_datagram(self, proc_id: int, port: int, data: bytes) -> Packet | None:
        """Process a datagram received for a listener.

        Return the packet handed to the listener, or None when the datagram is
        malformed, out of range or sent by this node.
        """
        listener = self.proc_queue.get_listener(proc_id, port)
        if listener is None:
            raise IruError(f"no listener on port {port} for process {proc_id}")
        try:
            packet = deserialize_packet(data)
        except PacketFormatError as exc:
            log.warning("dropping malformed datagram: %s", exc)
            return None
        packet = filter_packet(packet)
        if packet is None or packet.src_addr == self.source_ip:
            return None
        listener.deliver(packet)
        with contextlib.suppress(ProcQueueError):
            self.proc_queue.remove_listener(proc_id, port)
        return packet

    def _receive_loop(
        self, sock: socket.socket, proc_id: int, port: int, stop: threading.Event
    ) -> None:
        sock.settimeout(_POLL_INTERVAL)
        with sock:
            while not stop.is_set():
                try:
                    data, _ = sock.recvfrom(_RECV_BUFFER)
                except socket.timeout:
                    continue
                except OSError:
                    break
                try:
                    if self.handle_datagram(proc_id, port, data) is not None:
                        break
                except IruError:
                    break

    def recv(
        self,
        proc_id: int,
        port: int,
        conn_type: ConnType = ConnType.UDP,
        timeout: float | None = None,
    ) -> Packet:
        """Wait for one packet addressed to ``port`` for a registered process."""
        if self.proc_queue.get_process(proc_id) is None:
            raise IruError(f"process {proc_id} not found")
        conn_type = ConnType(conn_type)
        listener = self.proc_queue.add_listener(proc_id, port)
        if conn_type is not ConnType.UDP:
            self.proc_queue.remove_listener(proc_id, port)
            raise IruError(f"{conn_type.name} protocol not supported yet")
        try:
            sock = open_receiver(port)
        except OSError as exc:
            self.proc_queue.remove_listener(proc_id, port)
            raise IruError(f"failed to listen on port {port}") from exc

        stop = threading.Event()
        with self._receivers_lock:
            self._receivers.add(stop)
        thread = threading.Thread(
            target=self._receive_loop,
            args=(sock, proc_id, port, stop),
            name=f"iru-recv-{port}",
            daemon=True,
        )
        thread.start()
        try:
            return listener.wait(timeout)
        except TimeoutError:
            with contextlib.suppress(ProcQueueError):
                self.proc_queue.remove_listener(proc_id, port)
            raise
        finally:
            stop.set()
            thread.join(timeout=1.0)
            with self._receivers_lock:
                self._receivers.discard(stop)

    def close(self) -> None:
        """Stop every receiver and close the sending socket if it is ours."""
        with self._receivers_lock:
            for stop in self._receivers:
                stop.set()
        if self._owns_sender and self._sender is not None:
            self._sender.close()
        self._sender = None

    def __enter__(self) -> Iru:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()