import itertools
from datetime import datetime, timedelta, timezone

import pytest

from study_planner.data import LocalStorage, StudyStorage
from study_planner.services import StudyStore


class FakeClock:
    """Callable wall clock that only moves when told to."""

    def __init__(self, start=None):
        self.now = start or datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FakeMonotonic:
    def __init__(self):
        self.value = 1000.0

    def __call__(self):
        return self.value

    def advance(self, seconds):
        self.value += seconds


@pytest.fixture
def storage_path(tmp_path):
    return tmp_path / "storage.json"


@pytest.fixture
def storage(storage_path):
    return StudyStorage(LocalStorage(storage_path))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def monotonic():
    return FakeMonotonic()


@pytest.fixture
def store(storage, clock):
    counter = itertools.count(1)
    return StudyStore(storage, clock=clock, id_factory=lambda: f"id-{next(counter)}")


@pytest.fixture
def math_store(store):
    store.add_subject("Math")
    return store


def make_task(store, title="HW1", subject="Math", due="2025-01-10", **extra):
    payload = {"title": title, "subject": subject, "due": due}
    payload.update(extra)
    return store.create_task(payload)
