"""Shared fixtures: a deterministic clock and id source for the store."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from parcel.core.store import NotesStore, sanitize_document


class FakeClock:
    """Millisecond clock that advances by ``step`` on every read."""

    def __init__(self, start: int = 1_000, step: int = 10) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


class SequentialIds:
    """Id factory returning ``id-1``, ``id-2``, ..."""

    def __init__(self) -> None:
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"id-{self.count}"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def store(clock: FakeClock, ids: SequentialIds) -> NotesStore:
    """An unhydrated store with deterministic time and ids."""
    return NotesStore(clock=clock, id_factory=ids)


@pytest.fixture
def hydrated(store: NotesStore) -> Callable[[dict[str, Any]], NotesStore]:
    """Adopt a raw document into ``store`` the way hydration does."""

    def _hydrate(raw: dict[str, Any]) -> NotesStore:
        store.adopt(sanitize_document(raw, clock=store.clock, id_factory=store.id_factory))
        return store

    return _hydrate


def note_payload(note_id: str, **fields: Any) -> dict[str, Any]:
    """A raw, wire-format note entry with sensible defaults."""
    payload: dict[str, Any] = {
        "id": note_id,
        "title": "",
        "body": "",
        "folderId": None,
        "pinned": False,
        "color": "paper",
        "createdAt": 100,
        "updatedAt": 100,
    }
    payload.update(fields)
    return payload


def folder_payload(folder_id: str, name: str = "Notes") -> dict[str, Any]:
    return {"id": folder_id, "name": name, "createdAt": 50, "updatedAt": 50}
