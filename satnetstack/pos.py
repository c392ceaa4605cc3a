"""Positions of nanosats and the radio range check."""

from __future__ import annotations

from ipaddress import IPv4Address

from satnetstack.model import Position

_RANGE = 10.0


def receiver_position() -> Position:
    """Current position of this node; fixed at the origin for now."""
    return Position(0.0, 0.0, 0.0)


def get_range() -> float:
    """Radio range of this node."""
    return _RANGE


def get_position(ip_addr: IPv4Address | None) -> Position:
    """Position of the nanosat with the given address; fixed at the origin for now."""
    return Position(0.0, 0.0, 0.0)


def is_in_range(sender: Position) -> bool:
    """Whether ``sender`` lies within this node's radio range."""
    return sender.distance_to(receiver_position()) <= get_range()