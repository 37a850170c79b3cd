"""Shared fixtures: deterministic clock, ids, and in-memory storage."""

from __future__ import annotations

import itertools
import locale

import pytest

from notes_engine.backends import InMemoryKeyValueStore
from notes_engine.storage import StorageAdapter
from notes_engine.store import NoteStore


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1) -> int:
        self.now += ms
        return self.now


def sequential_ids(prefix: str = "n"):
    counter = itertools.count(1)
    return lambda: f"{prefix}{next(counter)}"


@pytest.fixture(autouse=True)
def _restore_collation():
    """build_app changes LC_COLLATE process-wide; put it back after each test."""
    saved = locale.setlocale(locale.LC_COLLATE)
    yield
    locale.setlocale(locale.LC_COLLATE, saved)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def storage(kv: InMemoryKeyValueStore) -> StorageAdapter:
    return StorageAdapter(kv)


@pytest.fixture()
def store(storage: StorageAdapter, clock: FakeClock) -> NoteStore:
    return NoteStore(storage, clock=clock, id_factory=sequential_ids())
