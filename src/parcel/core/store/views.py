"""Pure, on-demand views over store state.

Nothing here caches: each call recomputes from the tuples it is given, which
is cheap at the note counts a local notebook holds.
"""

from __future__ import annotations

import locale
from collections.abc import Iterable

from parcel.core.contracts import Note

UNTITLED = "Untitled"


def find_note(notes: Iterable[Note], note_id: str | None) -> Note | None:
    """Return the note with ``note_id``, or ``None`` if unset or absent."""
    if note_id is None:
        return None
    return next((n for n in notes if n.id == note_id), None)


def _title_key(note: Note) -> str:
    # Empty titles compare as the placeholder; the stored title is untouched.
    return locale.strxfrm((note.title or UNTITLED).casefold())


def matches_search(note: Note, query: str) -> bool:
    """Case-insensitive substring match against title or body.

    ``query`` must already be trimmed and case-folded; an empty query
    matches everything.
    """
    if not query:
        return True
    return query in note.title.casefold() or query in note.body.casefold()


def visible_notes(
    notes: Iterable[Note],
    *,
    search: str = "",
    active_folder_id: str | None = None,
    sort_by: str = "updated",
) -> list[Note]:
    """
    Filter and sort notes for display.

    Filtering keeps notes in ``active_folder_id`` (all notes when it is
    ``None``) whose title or body contains the trimmed search text. Pinned
    notes always come first; within each group the order follows ``sort_by``:

    - ``"updated"``: most recently updated first
    - ``"created"``: most recently created first
    - ``"title"``: alphabetical, case-insensitive, blank titles as "Untitled"

    Unknown sort keys behave like ``"updated"``. Both sorts are stable.
    """
    query = search.strip().casefold()
    filtered = [
        n
        for n in notes
        if (active_folder_id is None or n.folder_id == active_folder_id)
        and matches_search(n, query)
    ]

    if sort_by == "created":
        filtered.sort(key=lambda n: n.created_at, reverse=True)
    elif sort_by == "title":
        filtered.sort(key=_title_key)
    else:
        filtered.sort(key=lambda n: n.updated_at, reverse=True)

    # Stable partition: pinned group first, each group keeps the order above.
    return [n for n in filtered if n.pinned] + [n for n in filtered if not n.pinned]


__all__ = ["UNTITLED", "find_note", "matches_search", "visible_notes"]
