"""
Persistence gateway: hydrate the store from storage and save it back.

The gateway is the only part of the store that awaits. It talks to a
:class:`StorageBackend` through two coroutines (``load`` and ``save``) and
turns every backend failure into store state instead of an exception:

Load failures
-------------
- **corrupt**: the error message mentions "corrupt" or "parse". The store is
  reset to an empty notebook and ``store.error`` explains what happened.
- **first run**: anything else (typically a missing file). The store is reset
  to an empty notebook silently.

Save failures
-------------
``store.error`` is set to a "Failed to save notes" message and ``save()``
returns ``False``. Nothing is retried; the next save trigger tries again with
whatever state is current by then.

Concurrent saves are neither locked nor queued. Each call captures the
document synchronously before its first ``await``, so every write carries a
complete snapshot and the last write to finish wins.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, Protocol

from parcel.core.contracts import ParcelDocument
from parcel.core.settings import get_logger

from .notes_store import NotesStore
from .sanitizer import sanitize_document

logger = get_logger(__name__)

LoadFailure = Literal["corrupt", "first_run"]

#: Substrings that mark a load failure as a damaged document.
CORRUPTION_MARKERS: tuple[str, ...] = ("corrupt", "parse")


class StorageBackend(Protocol):
    """What the gateway needs from a storage implementation."""

    async def load(self) -> Mapping[str, Any] | ParcelDocument: ...

    async def save(self, document: ParcelDocument) -> None: ...


def classify_load_error(exc: BaseException) -> LoadFailure:
    """Classify a load failure by its message.

    This is a text heuristic: backends are expected to mention "corrupt" or
    "parse" when the document exists but cannot be read.
    """
    message = str(exc).lower()
    if any(marker in message for marker in CORRUPTION_MARKERS):
        return "corrupt"
    return "first_run"


def corruption_message(exc: BaseException) -> str:
    return (
        "Data file appears to be corrupt. Starting with empty notes. "
        f"Original error: {exc}"
    )


def save_failure_message(exc: BaseException) -> str:
    return f"Failed to save notes: {exc}"


class PersistenceGateway:
    """Load/save orchestration between a :class:`NotesStore` and a backend."""

    def __init__(self, store: NotesStore, backend: StorageBackend) -> None:
        self.store = store
        self.backend = backend

    async def hydrate(self) -> None:
        """
        Load the persisted document into the store.

        On success the sanitized document becomes live state and the single
        history entry. On failure the store starts empty (see module notes).
        This method does not raise for backend errors.
        """
        try:
            raw = await self.backend.load()
        except Exception as exc:
            kind = classify_load_error(exc)
            if kind == "corrupt":
                logger.error("Notes document is corrupt, starting empty: %s", exc)
                self.store.adopt(self.store.empty_document(), error=corruption_message(exc))
            else:
                logger.info("No notes document found (%s); starting fresh", exc)
                self.store.adopt(self.store.empty_document())
            return

        document = sanitize_document(
            raw, clock=self.store.clock, id_factory=self.store.id_factory
        )
        self.store.adopt(document)
        logger.info(
            "Hydrated %d note(s) in %d folder(s)", len(document.notes), len(document.folders)
        )

    async def save(self) -> bool:
        """
        Write the current notes and folders to the backend.

        Returns
        -------
        bool
            ``True`` on success (any previous error is cleared), ``False`` if
            the backend failed (``store.error`` describes why).
        """
        document = self.store.document()
        try:
            await self.backend.save(document)
        except Exception as exc:
            logger.error("Saving notes failed: %s", exc)
            self.store.set_error(save_failure_message(exc))
            return False

        if self.store.error is not None:
            self.store.clear_error()
        logger.debug("Saved %d note(s)", len(document.notes))
        return True


__all__ = [
    "CORRUPTION_MARKERS",
    "LoadFailure",
    "PersistenceGateway",
    "StorageBackend",
    "classify_load_error",
    "corruption_message",
    "save_failure_message",
]
