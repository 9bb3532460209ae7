"""
Validation and repair of a freshly loaded notes document.

The loader hands over whatever it found on disk. Rather than rejecting the
whole document for one bad entry, the sanitizer keeps every entry it can use:

- Folders survive only with a non-empty ``id`` and a non-blank ``name``.
  If none survive, one default folder is synthesized.
- Notes survive only with a non-empty ``id``. An unknown ``color`` becomes
  ``"paper"``; ill-typed secondary fields fall back to their defaults.

Nothing in here raises for malformed data; repairs are logged instead.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from parcel.core.contracts import (
    DEFAULT_COLOR,
    NOTE_COLORS,
    Folder,
    Note,
    ParcelDocument,
)
from parcel.core.settings import get_logger

from .factories import Clock, IdFactory, make_default_folder, new_id, now_ms

logger = get_logger(__name__)


def _field(entry: Mapping[str, Any], alias: str, name: str) -> Any:
    """Read a field by its wire alias, falling back to the Python name."""
    if alias in entry:
        return entry[alias]
    return entry.get(name)


def _as_ms(value: Any, fallback: int) -> int:
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return fallback


def _non_empty_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _sanitize_folder(entry: Any, t: int) -> Folder | None:
    if not isinstance(entry, Mapping):
        return None
    folder_id = _non_empty_str(entry.get("id"))
    name = entry.get("name")
    if folder_id is None or not isinstance(name, str) or not name.strip():
        return None
    created = _as_ms(_field(entry, "createdAt", "created_at"), t)
    return Folder(
        id=folder_id,
        name=name,
        created_at=created,
        updated_at=_as_ms(_field(entry, "updatedAt", "updated_at"), created),
    )


def _sanitize_note(entry: Any, t: int) -> tuple[Note | None, bool]:
    """Return ``(note, recolored)``; ``note`` is ``None`` if the entry is unusable."""
    if not isinstance(entry, Mapping):
        return None, False
    note_id = _non_empty_str(entry.get("id"))
    if note_id is None:
        return None, False

    color = entry.get("color")
    recolored = color not in NOTE_COLORS
    if recolored:
        logger.debug("Note %s: invalid color %r coerced to %r", note_id, color, DEFAULT_COLOR)
        color = DEFAULT_COLOR

    title = entry.get("title")
    body = entry.get("body")
    folder_id = _field(entry, "folderId", "folder_id")
    created = _as_ms(_field(entry, "createdAt", "created_at"), t)

    note = Note(
        id=note_id,
        title=title if isinstance(title, str) else "",
        body=body if isinstance(body, str) else "",
        folder_id=folder_id if isinstance(folder_id, str) and folder_id else None,
        pinned=entry.get("pinned") is True,
        color=color,
        created_at=created,
        updated_at=_as_ms(_field(entry, "updatedAt", "updated_at"), created),
    )
    return note, recolored


def sanitize_document(
    raw: Mapping[str, Any] | ParcelDocument | None,
    *,
    clock: Clock = now_ms,
    id_factory: IdFactory = new_id,
) -> ParcelDocument:
    """
    Validate and repair a loaded document.

    Parameters
    ----------
    raw:
        The document as produced by the storage backend: a JSON-decoded
        mapping, an already-typed :class:`ParcelDocument`, or ``None``.
    clock, id_factory:
        Sources for timestamps and ids of any synthesized default folder and
        for missing timestamps.

    Returns
    -------
    ParcelDocument
        A document satisfying the live-state invariants: at least one folder,
        every note has an id and a valid color.
    """
    if isinstance(raw, ParcelDocument):
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, Mapping):
        raw = {}

    t = clock()
    raw_folders = raw.get("folders")
    raw_notes = raw.get("notes")
    raw_folders = raw_folders if isinstance(raw_folders, list | tuple) else []
    raw_notes = raw_notes if isinstance(raw_notes, list | tuple) else []

    folders = [f for f in (_sanitize_folder(entry, t) for entry in raw_folders) if f is not None]
    dropped_folders = len(raw_folders) - len(folders)
    synthesized = not folders
    if synthesized:
        folders.append(make_default_folder(clock=clock, id_factory=id_factory))

    notes: list[Note] = []
    recolored = 0
    for entry in raw_notes:
        note, fixed = _sanitize_note(entry, t)
        if note is None:
            logger.debug("Dropping malformed note entry: %r", entry)
            continue
        recolored += int(fixed)
        notes.append(note)
    dropped_notes = len(raw_notes) - len(notes)

    if dropped_folders or dropped_notes or recolored or (synthesized and raw_folders):
        logger.info(
            "Sanitized document: dropped %d folder(s), %d note(s); recolored %d note(s)%s",
            dropped_folders,
            dropped_notes,
            recolored,
            "; synthesized default folder" if synthesized else "",
        )

    return ParcelDocument(notes=tuple(notes), folders=tuple(folders))


__all__ = ["sanitize_document"]
