"""Pytest configuration and shared fixtures."""

import pytest

from natsmock import Client, DeferredQueue, Registry


@pytest.fixture
def scheduler():
    """A fresh deferral queue drained explicitly by each test."""
    return DeferredQueue()


@pytest.fixture
def registry(scheduler):
    """An isolated registry so tests never share server state."""
    return Registry(scheduler=scheduler)


@pytest.fixture
def make_client(registry):
    """Factory for connected clients on the test registry."""

    def _make(url=None) -> Client:
        return Client.connect({"url": url}, registry=registry)

    return _make


@pytest.fixture
def recorder():
    """Callback that records every (message, reply_to, subject) it receives."""

    class Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, message, reply_to, subject):
            self.calls.append((message, reply_to, subject))

    return Recorder()
