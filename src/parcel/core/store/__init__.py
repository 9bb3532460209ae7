"""Notes state store: live state, undo history, derived views and persistence."""

from __future__ import annotations

from .autosave import AutosaveScheduler
from .history import DEFAULT_HISTORY_SIZE, HistoryManager, HistorySnapshot
from .notes_store import NotesStore
from .persistence import PersistenceGateway, StorageBackend, classify_load_error
from .sanitizer import sanitize_document
from .views import visible_notes

__all__ = [
    "AutosaveScheduler",
    "DEFAULT_HISTORY_SIZE",
    "HistoryManager",
    "HistorySnapshot",
    "NotesStore",
    "PersistenceGateway",
    "StorageBackend",
    "classify_load_error",
    "sanitize_document",
    "visible_notes",
]
