"""Tests for JSON and Markdown export."""

from __future__ import annotations

import json

import pytest

from parcel.core.contracts import Folder, Note, ParcelDocument
from parcel.storage import export_json, export_markdown


@pytest.fixture
def document() -> ParcelDocument:
    work = Folder(id="f1", name="Work", created_at=1, updated_at=1)
    home = Folder(id="f2", name="Home", created_at=1, updated_at=1)
    notes = (
        Note(id="a", title="Standup", body="status", folder_id="f1", created_at=1, updated_at=1),
        Note(id="b", title="", body="", folder_id=None, pinned=True, color="sky",
             created_at=1, updated_at=1),
        Note(id="c", title="Lost", folder_id="gone", created_at=1, updated_at=1),
    )
    return ParcelDocument(notes=notes, folders=(work, home))


def test_export_json_matches_payload(document: ParcelDocument) -> None:
    text = export_json(document)
    assert json.loads(text) == document.to_payload()
    assert '\n  "notes"' in text


def test_export_markdown_groups_by_folder(document: ParcelDocument) -> None:
    md = export_markdown(document)
    lines = md.splitlines()

    assert lines[0] == "# Parcel Notes Export"
    assert "*Total notes: 3*" in lines
    assert "*Total folders: 2*" in lines
    assert lines.index("## Folder: Work") < lines.index("### Standup") < lines.index(
        "## Folder: Home"
    )
    assert "*Color: paper | Pinned: false*" in lines


def test_export_markdown_unfiled_section(document: ParcelDocument) -> None:
    md = export_markdown(document)
    lines = md.splitlines()

    unfiled = lines.index("## Notes (No Folder)")
    assert lines[unfiled + 2] == "### Untitled"
    assert "*Color: sky | Pinned: true*" in lines[unfiled:]
    # A note whose folder is gone is neither filed nor unfiled.
    assert "### Lost" not in lines


def test_export_markdown_without_unfiled_notes() -> None:
    folder = Folder(id="f1", name="Notes", created_at=1, updated_at=1)
    md = export_markdown(ParcelDocument(notes=(), folders=(folder,)))
    assert "## Notes (No Folder)" not in md
    assert "## Folder: Notes" in md
