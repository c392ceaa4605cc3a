"""Discard packets sent from outside this node's radio range."""

from __future__ import annotations

from satnetstack.model import Packet
from satnetstack.pos import get_position, is_in_range


def filter_packet(packet: Packet | None) -> Packet | None:
    """Return ``packet`` if its sender is within range, otherwise None."""
    if packet is None or packet.src_addr is None:
        return None
    if not is_in_range(get_position(packet.src_addr)):
        return None
    return packet