"""Export a notes document as pretty JSON or as a Markdown digest."""

from __future__ import annotations

import json
from collections import defaultdict

from parcel.core.contracts import Note, ParcelDocument
from parcel.core.store.views import UNTITLED


def export_json(document: ParcelDocument) -> str:
    """Return the document as indented JSON with its on-disk key names."""
    return json.dumps(document.to_payload(), ensure_ascii=False, indent=2)


def _note_lines(note: Note) -> list[str]:
    lines = [f"### {note.title or UNTITLED}", ""]
    if note.body:
        lines += [note.body, ""]
    lines += [f"*Color: {note.color} | Pinned: {str(note.pinned).lower()}*", ""]
    return lines


def export_markdown(document: ParcelDocument) -> str:
    """
    Render the document as Markdown.

    Notes are grouped under a ``## Folder: <name>`` heading per folder, in
    folder order, followed by a ``## Notes (No Folder)`` section for unfiled
    notes. Notes pointing at a folder that no longer exists are not listed.
    """
    by_folder: dict[str | None, list[Note]] = defaultdict(list)
    for note in document.notes:
        by_folder[note.folder_id].append(note)

    lines = [
        "# Parcel Notes Export",
        "",
        f"*Total notes: {len(document.notes)}*",
        f"*Total folders: {len(document.folders)}*",
        "",
    ]
    for folder in document.folders:
        lines += [f"## Folder: {folder.name}", ""]
        for note in by_folder.get(folder.id, []):
            lines += _note_lines(note)

    unfiled = by_folder.get(None, [])
    if unfiled:
        lines += ["## Notes (No Folder)", ""]
        for note in unfiled:
            lines += _note_lines(note)

    return "\n".join(lines)


__all__ = ["export_json", "export_markdown"]
