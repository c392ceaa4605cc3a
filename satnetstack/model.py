"""Core value types shared across the network stack."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from ipaddress import IPv4Address


class ConnType(IntEnum):
    """Transport protocol carried by a packet."""

    UDP = 0
    TCP = 1


@dataclass
class Packet:
    """A routed packet as exchanged through the internal router unit."""

    src_addr: IPv4Address | None = None
    dest_addr: IPv4Address | None = None
    next_hop_addr: IPv4Address | None = None
    proto: ConnType = ConnType.UDP
    dest_port: int = 0
    payload: bytes = b""

    @property
    def payload_len(self) -> int:
        """Length of the payload in bytes."""
        return len(self.payload)


@dataclass(frozen=True)
class Position:
    """A point in three-dimensional space."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def distance_to(self, other: Position) -> float:
        """Euclidean distance between this position and ``other``."""
        return math.dist((self.x, self.y, self.z), (other.x, other.y, other.z))