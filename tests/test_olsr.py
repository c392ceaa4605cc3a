import queue
import time

import pytest

from satnetstack.iru import IruError
from satnetstack.model import ConnType
from satnetstack.olsr import OlsrNode


class FakeRouter:
    def __init__(self, proc_id=42, fail_register=False):
        self.proc_id = proc_id
        self.fail_register = fail_register
        self.sent = []
        self.incoming = queue.Queue()

    def register_process(self):
        if self.fail_register:
            raise IruError("registration failed")
        return self.proc_id

    def send(self, packet):
        self.sent.append(packet)

    def recv(self, proc_id, port, conn_type=ConnType.UDP, timeout=None):
        try:
            return self.incoming.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError from None


def test_new_node_state():
    node = OlsrNode(FakeRouter())
    assert node.is_mpr is False
    assert node.one_hop_neighbors.is_empty()
    assert len(node.mprs) == 0
    assert len(node.mpr_selectors) == 0
    assert node.hello is None


def test_start_runs_hello_with_registered_id():
    router = FakeRouter(proc_id=42)
    node = OlsrNode(router)
    node.start()
    try:
        assert node.hello.proc_id == 42
        assert node.hello.one_hop_neighbors is node.one_hop_neighbors
        assert node.hello.mprs is node.mprs
        deadline = time.monotonic() + 3
        while time.monotonic() < deadline and not router.sent:
            time.sleep(0.02)
    finally:
        node.stop()
    assert len(router.sent) >= 1
    assert node.hello is None


def test_start_fails_when_registration_fails():
    node = OlsrNode(FakeRouter(fail_register=True))
    with pytest.raises(IruError):
        node.start()
    assert node.hello is None


def test_stop_without_start_leaves_no_service():
    node = OlsrNode(FakeRouter())
    node.stop()
    assert node.hello is None