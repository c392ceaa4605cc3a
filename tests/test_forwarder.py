import socket

import pytest

from satnetstack.forwarder import (
    BROADCAST_ADDRESS,
    STACK_ADDRESS,
    Forwarder,
    init_forwarder,
)
from satnetstack.model import ConnType


class _RecordingSocket:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    def sendto(self, data, addr):
        if self.fail:
            raise OSError("network unreachable")
        self.sent.append((data, addr))
        return len(data)


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as probe:
        probe.bind(("", 0))
        return probe.getsockname()[1]


def test_datagram_from_stack_is_broadcast():
    fwd = Forwarder(1698)
    assert fwd.route("192.168.1.2") == ("10.0.0.255", 1698)


def test_datagram_from_network_goes_to_stack():
    fwd = Forwarder(1698)
    assert fwd.route("10.0.0.7") == ("192.168.1.2", 1698)


def test_custom_addresses_are_used():
    fwd = Forwarder(4000, stack_addr="127.0.0.1", broadcast_addr="127.255.255.255")
    assert fwd.route("127.0.0.1") == ("127.255.255.255", 4000)
    assert fwd.route("127.0.0.9") == ("127.0.0.1", 4000)


def test_defaults_match_module_constants():
    fwd = Forwarder(1)
    assert fwd.stack_addr == STACK_ADDRESS
    assert fwd.broadcast_addr == BROADCAST_ADDRESS


def test_handle_sends_payload_to_routed_destination():
    fwd = Forwarder(1698)
    sock = _RecordingSocket()
    sent = fwd.handle(sock, b"hello", ("10.0.0.3", 5555))
    assert sent == 5
    assert sock.sent == [(b"hello", ("192.168.1.2", 1698))]


def test_handle_reports_failure_as_none():
    fwd = Forwarder(1698)
    sock = _RecordingSocket(fail=True)
    assert fwd.handle(sock, b"data", ("192.168.1.2", 1698)) is None


def test_invalid_stack_address_rejected():
    with pytest.raises(ValueError):
        Forwarder(1698, stack_addr="not-an-address")


def test_init_forwarder_rejects_tcp():
    with pytest.raises(ValueError):
        init_forwarder(1698, ConnType.TCP)


def test_init_forwarder_rejects_unknown_type():
    with pytest.raises(ValueError):
        init_forwarder(1698, 42)


def test_start_binds_the_port():
    port = _free_port()
    fwd = Forwarder(port)
    thread = fwd.start()
    assert thread.is_alive()
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as other:
        with pytest.raises(OSError):
            other.bind(("", port))