"""Typed data contracts for notes, folders and the persisted document."""

from __future__ import annotations

from .note import (
    DEFAULT_COLOR,
    DEFAULT_FOLDER_NAME,
    DOCUMENT_VERSION,
    NOTE_COLORS,
    Folder,
    Note,
    NoteColor,
    ParcelDocument,
    SortOption,
)

__all__ = [
    "DEFAULT_COLOR",
    "DEFAULT_FOLDER_NAME",
    "DOCUMENT_VERSION",
    "NOTE_COLORS",
    "Folder",
    "Note",
    "NoteColor",
    "ParcelDocument",
    "SortOption",
]
