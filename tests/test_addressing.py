from ipaddress import IPv4Address

import pytest

from satnetstack.addressing import (
    BadAddressError,
    BadMaskError,
    InterfaceConfig,
    NetifError,
    interface_config,
    parse_ip4,
    prefixlen_to_mask,
)


def test_parse_plain_address():
    assert parse_ip4("192.168.1.2") == IPv4Address("192.168.1.2")


def test_parse_ignores_trailing_text():
    assert parse_ip4("10.0.0.1xyz") == IPv4Address("10.0.0.1")


def test_parse_allows_leading_whitespace():
    assert parse_ip4("  10.0.0.255") == IPv4Address("10.0.0.255")


@pytest.mark.parametrize("text", ["", "10.0.0", "a.b.c.d", "10..0.1", "-1.0.0.0"])
def test_parse_rejects_malformed(text):
    with pytest.raises(BadAddressError):
        parse_ip4(text)


@pytest.mark.parametrize("text", ["256.0.0.1", "1.2.3.999", "1000.0.0.0"])
def test_parse_rejects_large_octets(text):
    with pytest.raises(BadAddressError):
        parse_ip4(text)


def test_bad_address_is_netif_error():
    with pytest.raises(NetifError):
        parse_ip4("nope")


def test_mask_24():
    assert prefixlen_to_mask(24) == IPv4Address("255.255.255.0")


def test_mask_extremes():
    assert prefixlen_to_mask(32) == IPv4Address("255.255.255.255")
    assert prefixlen_to_mask(0) == IPv4Address("0.0.0.0")


@pytest.mark.parametrize("prefixlen", range(33))
def test_mask_has_prefixlen_leading_ones(prefixlen):
    value = int(prefixlen_to_mask(prefixlen))
    assert bin(value).count("1") == prefixlen
    # ones must be contiguous from the top
    assert (value | (value >> 1)) & 0xFFFFFFFF | (0xFFFFFFFF >> prefixlen) == 0xFFFFFFFF
    assert value & (0xFFFFFFFF >> prefixlen) == 0


@pytest.mark.parametrize("prefixlen", [-1, 33, 100])
def test_mask_out_of_range(prefixlen):
    with pytest.raises(BadMaskError):
        prefixlen_to_mask(prefixlen)


def test_interface_config_fields():
    config = interface_config("192.168.1.2", 24)
    assert isinstance(config, InterfaceConfig)
    assert config.address == IPv4Address("192.168.1.2")
    assert config.netmask == prefixlen_to_mask(24)
    assert config.gateway == IPv4Address("192.168.1.1")


def test_interface_config_network_contains_address_and_gateway():
    config = interface_config("192.168.1.2", 24)
    assert config.address in config.network
    assert config.gateway in config.network
    assert config.network.prefixlen == 24


def test_interface_config_none_address():
    with pytest.raises(NetifError):
        interface_config(None, 24)


def test_interface_config_bad_address():
    with pytest.raises(BadAddressError):
        interface_config("300.1.1.1", 24)


def test_interface_config_bad_mask():
    with pytest.raises(BadMaskError):
        interface_config("192.168.1.2", 40)