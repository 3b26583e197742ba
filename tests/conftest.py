import queue
import threading

import pytest

from vanity.keygen import KeyPair

FILLER_ADDRESS = "11111111111111111111111111111111"


def make_keypair(address):
    """Keypair stand-in carrying only an address."""
    return KeyPair(public_key=b"", address=address, secret_key=bytes(64))


class SequenceGenerator:
    """Thread-safe stub generator: returns given addresses at given call indexes."""

    def __init__(self, addresses=None, filler=FILLER_ADDRESS):
        self._lock = threading.Lock()
        self.addresses = dict(addresses or {})
        self.filler = filler
        self.calls = 0

    def __call__(self):
        with self._lock:
            index = self.calls
            self.calls += 1
        return make_keypair(self.addresses.get(index, self.filler))


@pytest.fixture
def fixed_workers(monkeypatch):
    """Pin the coordinator's worker count so parallel paths run on any host."""
    def pin(count):
        monkeypatch.setattr("vanity.coordinator.get_worker_count", lambda max_workers=None: count)
    return pin


class LocalManager:
    """In-process stand-in for multiprocessing.Manager, exposing its stop event."""

    def __init__(self):
        self.stop_event = threading.Event()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def Event(self):
        return self.stop_event

    def Queue(self):
        return queue.Queue()


@pytest.fixture
def local_manager(monkeypatch):
    """Replace the coordinator's Manager so tests can observe the stop signal."""
    manager = LocalManager()
    monkeypatch.setattr("vanity.coordinator.Manager", lambda: manager)
    return manager
