"""Relay UDP datagrams between the outside network and the local stack."""

from __future__ import annotations

import logging
import socket
import threading
from ipaddress import IPv4Address

from satnetstack.model import ConnType

BUFFER_SIZE = 1024
STACK_ADDRESS = "192.168.1.2"
BROADCAST_ADDRESS = "10.0.0.255"

log = logging.getLogger(__name__)


class Forwarder:
    """Forward datagrams received on a port to the stack, and the stack's own
    datagrams to the whole network."""

    def __init__(
        self,
        port: int,
        stack_addr: str | IPv4Address = STACK_ADDRESS,
        broadcast_addr: str | IPv4Address = BROADCAST_ADDRESS,
    ) -> None:
        self.port = port
        self.stack_addr = str(IPv4Address(stack_addr))
        self.broadcast_addr = str(IPv4Address(broadcast_addr))
        self._sock: socket.socket | None = None

    def route(self, client_host: str) -> tuple[str, int]:
        """Destination of a datagram that came from ``client_host``.

        A datagram from the stack itself is broadcast to the network; anything
        else is handed to the stack.
        """
        if client_host == self.stack_addr:
            return (self.broadcast_addr, self.port)
        return (self.stack_addr, self.port)

    def handle(
        self, sock: socket.socket, data: bytes, client_addr: tuple[str, int]
    ) -> int | None:
        """Forward one datagram; return bytes sent, or None if sending failed."""
        destination = self.route(client_addr[0])
        try:
            return sock.sendto(data, destination)
        except OSError as exc:
            log.error("packet forwarding to %s:%d failed: %s", *destination, exc)
            return None

    def _open(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            sock.bind(("", self.port))
        except OSError:
            sock.close()
            raise
        return sock

    def serve_forever(self) -> None:
        """Receive and forward datagrams until the socket is closed."""
        sock = self._sock if self._sock is not None else self._open()
        self._sock = None
        with sock:
            while True:
                try:
                    data, client_addr = sock.recvfrom(BUFFER_SIZE)
                except OSError as exc:
                    if sock.fileno() == -1:
                        break
                    log.error("packet reception failed: %s", exc)
                    continue
                self.handle(sock, data, client_addr)

    def start(self) -> threading.Thread:
        """Bind the socket now and forward in a background thread."""
        self._sock = self._open()
        thread = threading.Thread(
            target=self.serve_forever, name=f"forwarder-{self.port}", daemon=True
        )
        thread.start()
        return thread


def init_forwarder(port: int, conn_type: ConnType = ConnType.UDP) -> Forwarder:
    """Start forwarding ``port`` in the background and return the forwarder."""
    conn_type = ConnType(conn_type)
    if conn_type is not ConnType.UDP:
        raise ValueError(f"{conn_type.name} redirection is not supported")
    forwarder = Forwarder(port)
    forwarder.start()
    return forwarder