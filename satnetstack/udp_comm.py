"""Wire format of router packets and UDP socket helpers."""

from __future__ import annotations

import socket
import struct
from ipaddress import IPv4Address

from satnetstack.model import ConnType, Packet

# src, dest, next hop (network order), proto, dest_port, payload_len
_HEADER = struct.Struct("<4s4s4siiQ")
HEADER_SIZE = _HEADER.size


class PacketFormatError(ValueError):
    """Raised when a packet cannot be serialized or a buffer cannot be decoded."""


def serialize_packet(packet: Packet) -> bytes:
    """Encode a packet; every address must be set."""
    if packet.src_addr is None or packet.dest_addr is None or packet.next_hop_addr is None:
        raise PacketFormatError("one or more address fields in packet are unset")
    header = _HEADER.pack(
        packet.src_addr.packed,
        packet.dest_addr.packed,
        packet.next_hop_addr.packed,
        int(packet.proto),
        packet.dest_port,
        len(packet.payload),
    )
    return header + bytes(packet.payload)


def deserialize_packet(buffer: bytes) -> Packet:
    """Decode a packet; bytes beyond the declared payload are ignored."""
    if len(buffer) < HEADER_SIZE:
        raise PacketFormatError("buffer too small for a packet header")
    src, dest, next_hop, proto, dest_port, payload_len = _HEADER.unpack_from(buffer)
    end = HEADER_SIZE + payload_len
    if end > len(buffer):
        raise PacketFormatError("payload length exceeds buffer size")
    try:
        conn_type = ConnType(proto)
    except ValueError as exc:
        raise PacketFormatError(f"unknown protocol {proto}") from exc
    return Packet(
        src_addr=IPv4Address(src),
        dest_addr=IPv4Address(dest),
        next_hop_addr=IPv4Address(next_hop),
        proto=conn_type,
        dest_port=dest_port,
        payload=bytes(buffer[HEADER_SIZE:end]),
    )


def _broadcast_socket() -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
    return sock


def open_receiver(port: int) -> socket.socket:
    """Open a broadcast-capable UDP socket bound to ``port`` on all interfaces."""
    sock = _broadcast_socket()
    try:
        sock.bind(("", port))
    except OSError:
        sock.close()
        raise
    return sock


def open_sender() -> socket.socket:
    """Open a broadcast-capable UDP socket bound to an ephemeral port."""
    sock = _broadcast_socket()
    try:
        sock.bind(("", 0))
    except OSError:
        sock.close()
        raise
    return sock


def send_packet(
    sock: socket.socket, packet: Packet, addr: IPv4Address | str, port: int
) -> int:
    """Serialize ``packet`` and send it to ``addr:port``; return bytes sent."""
    data = serialize_packet(packet)
    return sock.sendto(data, (str(addr), port))