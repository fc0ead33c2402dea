"""Shared fixtures for VITAE tests."""

import itertools

import pytest

from vitae.contexts.editing import ResumeStore
from vitae.contexts.editing.defaults import get_default_document
from vitae.contexts.persistence import DocumentPersistence, MemoryBackend


class FakeTimer:
    """threading.Timer stand-in that only fires when the test says so."""

    created = []

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        """Run the callback as the real timer thread would (even if cancelled)."""
        self.function(*self.args, **self.kwargs)


@pytest.fixture
def fake_timer():
    FakeTimer.created = []
    yield FakeTimer
    FakeTimer.created = []


@pytest.fixture
def id_factory():
    counter = itertools.count(100)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def persistence(backend):
    return DocumentPersistence(backend, key="resumeData")


@pytest.fixture
def store(persistence, fake_timer, id_factory):
    """Store over an empty MemoryBackend, seeded with the sample resume."""
    return ResumeStore(persistence, timer_factory=fake_timer, id_factory=id_factory)


@pytest.fixture
def sample_document():
    return get_default_document()
