"""Constructors for fresh notes and folders plus the default clock and ids."""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable

from parcel.core.contracts import DEFAULT_COLOR, DEFAULT_FOLDER_NAME, Folder, Note, NoteColor

Clock = Callable[[], int]
IdFactory = Callable[[], str]


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def new_id() -> str:
    return str(uuid.uuid4())


def make_folder(name: str, *, clock: Clock = now_ms, id_factory: IdFactory = new_id) -> Folder:
    t = clock()
    return Folder(id=id_factory(), name=name, created_at=t, updated_at=t)


def make_default_folder(*, clock: Clock = now_ms, id_factory: IdFactory = new_id) -> Folder:
    """The folder synthesized whenever the collection would otherwise be empty."""
    return make_folder(DEFAULT_FOLDER_NAME, clock=clock, id_factory=id_factory)


def make_note(
    folder_id: str | None,
    color: NoteColor = DEFAULT_COLOR,
    *,
    clock: Clock = now_ms,
    id_factory: IdFactory = new_id,
) -> Note:
    """A blank note, ready for immediate typing."""
    t = clock()
    return Note(
        id=id_factory(),
        title="",
        body="",
        folder_id=folder_id,
        pinned=False,
        color=color,
        created_at=t,
        updated_at=t,
    )


__all__ = [
    "Clock",
    "IdFactory",
    "now_ms",
    "new_id",
    "make_folder",
    "make_default_folder",
    "make_note",
]
