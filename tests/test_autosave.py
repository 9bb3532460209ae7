"""Tests for the debounced autosave scheduler."""

from __future__ import annotations

import asyncio
from typing import Any

import anyio
import pytest

from parcel.core.contracts import ParcelDocument
from parcel.core.settings import load_settings
from parcel.core.store import AutosaveScheduler, NotesStore, PersistenceGateway


class RecordingBackend:
    """Backend fake that records every document it is asked to save."""

    def __init__(self) -> None:
        self.saved: list[ParcelDocument] = []

    async def load(self) -> dict[str, Any]:
        return {"version": 1, "notes": [], "folders": [{"id": "f1", "name": "Notes"}]}

    async def save(self, document: ParcelDocument) -> None:
        self.saved.append(document)


def _gateway(store: NotesStore) -> tuple[PersistenceGateway, RecordingBackend]:
    backend = RecordingBackend()
    return PersistenceGateway(store, backend), backend


def test_burst_of_edits_is_saved_once(store: NotesStore) -> None:
    gateway, backend = _gateway(store)

    async def scenario() -> None:
        await gateway.hydrate()
        scheduler = AutosaveScheduler(gateway, delay_ms=20)
        scheduler.start()
        note = store.create_note()
        store.update_note(note.id, title="G")
        store.update_note(note.id, title="Gr")
        store.update_note(note.id, title="Groceries")
        assert scheduler.pending
        await asyncio.sleep(0.2)
        await scheduler.drain()
        assert not scheduler.pending
        scheduler.close()

    anyio.run(scenario)

    assert len(backend.saved) == 1
    assert backend.saved[0].notes[0].title == "Groceries"


def test_no_save_before_hydration(store: NotesStore) -> None:
    gateway, backend = _gateway(store)

    async def scenario() -> bool:
        scheduler = AutosaveScheduler(gateway, delay_ms=0)
        scheduler.start()
        store.create_folder("Early")
        await asyncio.sleep(0.05)
        flushed = await scheduler.flush()
        scheduler.close()
        return flushed

    assert anyio.run(scenario) is False
    assert backend.saved == []


def test_flush_saves_immediately_and_cancels_timer(store: NotesStore) -> None:
    gateway, backend = _gateway(store)

    async def scenario() -> None:
        await gateway.hydrate()
        scheduler = AutosaveScheduler(gateway, delay_ms=10_000)
        scheduler.start()
        store.create_note()
        assert scheduler.pending
        assert await scheduler.flush() is True
        assert not scheduler.pending
        scheduler.close()

    anyio.run(scenario)
    assert len(backend.saved) == 1


def test_close_stops_listening(store: NotesStore) -> None:
    gateway, backend = _gateway(store)

    async def scenario() -> None:
        await gateway.hydrate()
        scheduler = AutosaveScheduler(gateway, delay_ms=0)
        scheduler.start()
        scheduler.close()
        store.create_note()
        assert not scheduler.pending
        await asyncio.sleep(0.05)

    anyio.run(scenario)
    assert backend.saved == []


def test_context_manager_flushes_on_exit(store: NotesStore) -> None:
    gateway, backend = _gateway(store)

    async def scenario() -> None:
        await gateway.hydrate()
        async with AutosaveScheduler(gateway, delay_ms=10_000):
            store.create_folder("Work")

    anyio.run(scenario)
    assert len(backend.saved) == 1
    assert [f.name for f in backend.saved[0].folders] == ["Notes", "Work"]


def test_negative_delay_rejected(store: NotesStore) -> None:
    gateway, _ = _gateway(store)
    with pytest.raises(ValueError):
        AutosaveScheduler(gateway, delay_ms=-1)


def test_default_delay_comes_from_settings(store: NotesStore) -> None:
    gateway, _ = _gateway(store)
    assert AutosaveScheduler(gateway).delay_ms == load_settings().autosave_delay_ms
