"""IPv4 address parsing and interface configuration helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from ipaddress import IPv4Address, IPv4Network

DEFAULT_GATEWAY = "192.168.1.1"

# Each octet may be preceded by whitespace and a plus sign; trailing text is ignored.
_DOTTED_QUAD = re.compile(
    r"\s*\+?(\d+)\.\s*\+?(\d+)\.\s*\+?(\d+)\.\s*\+?(\d+)", re.ASCII
)


class NetifError(Exception):
    """Raised when a network interface cannot be configured."""


class BadAddressError(NetifError, ValueError):
    """Raised when an IPv4 address string is malformed or out of range."""


class BadMaskError(NetifError, ValueError):
    """Raised when a prefix length is outside 0..32."""


@dataclass(frozen=True)
class InterfaceConfig:
    """Address, netmask and gateway of a network interface."""

    address: IPv4Address
    netmask: IPv4Address
    gateway: IPv4Address

    @property
    def network(self) -> IPv4Network:
        """The subnet the interface address belongs to."""
        return IPv4Network(f"{self.address}/{self.netmask}", strict=False)


def parse_ip4(text: str) -> IPv4Address:
    """Parse a dotted-quad IPv4 address; every octet must be at most 255."""
    match = _DOTTED_QUAD.match(text)
    if match is None:
        raise BadAddressError(f"not an IPv4 address: {text!r}")
    octets = [int(group) for group in match.groups()]
    if any(octet > 255 for octet in octets):
        raise BadAddressError(f"octet out of range in {text!r}")
    return IPv4Address(bytes(octets))


def prefixlen_to_mask(prefixlen: int) -> IPv4Address:
    """Convert a prefix length (0..32) into a subnet mask."""
    if not 0 <= prefixlen <= 32:
        raise BadMaskError(f"prefix length out of range: {prefixlen}")
    return IPv4Address((0xFFFFFFFF << (32 - prefixlen)) & 0xFFFFFFFF)


def interface_config(ip_str: str | None, prefixlen: int) -> InterfaceConfig:
    """Build the configuration of an interface from an address and prefix length."""
    if ip_str is None:
        raise NetifError("no address given for the interface")
    address = parse_ip4(ip_str)
    gateway = parse_ip4(DEFAULT_GATEWAY)
    netmask = prefixlen_to_mask(prefixlen)
    return InterfaceConfig(address=address, netmask=netmask, gateway=gateway)