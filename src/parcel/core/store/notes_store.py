"""
In-memory notes store: live state, mutation API and derived views.

A :class:`NotesStore` is an explicitly constructed object owned by its host
(a UI shell, the CLI, a test). It holds:

- the document state: ``notes`` and ``folders`` (tuples of frozen models);
- UI state: selection, search text, active folder filter, sort key;
- the last user-visible ``error`` message, if any;
- a :class:`HistoryManager` for undo/redo.

Every change replaces the affected tuple wholesale and bumps ``revision``.
Listeners registered with :meth:`NotesStore.subscribe` are told about changes
to notes or folders; the autosave scheduler relies on this.

Undo recording
--------------
Tracked mutations push a history snapshot *before* and *after* the change.
One tracked action therefore occupies two history slots and takes two
``undo()`` calls to step over: the first restores the "before" entry (the
action is reverted), the second lands on the identical entry beneath it and
changes nothing visible. Tests depend on this behavior.

Only title/body edits of ``update_note`` are tracked; pin, color and folder
changes are applied without touching history.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from parcel.core.contracts import (
    DEFAULT_COLOR,
    Folder,
    Note,
    NoteColor,
    ParcelDocument,
    SortOption,
)
from parcel.core.settings import get_logger

from . import views
from .factories import (
    Clock,
    IdFactory,
    make_default_folder,
    make_folder,
    make_note,
    new_id,
    now_ms,
)
from .history import DEFAULT_HISTORY_SIZE, HistoryManager, HistorySnapshot

logger = get_logger(__name__)

Listener = Callable[["NotesStore"], None]

#: Fields a caller may patch through :meth:`NotesStore.update_note`.
PATCHABLE_FIELDS: frozenset[str] = frozenset({"title", "body", "folder_id", "pinned", "color"})
#: Patch fields whose change is recorded in undo history.
TRACKED_FIELDS: frozenset[str] = frozenset({"title", "body"})


class NotesStore:
    """Owned state container for notes, folders and their undo history."""

    def __init__(
        self,
        *,
        history_size: int = DEFAULT_HISTORY_SIZE,
        clock: Clock | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        self._clock: Clock = clock or now_ms
        self._new_id: IdFactory = id_factory or new_id

        self._hydrated = False
        self._notes: tuple[Note, ...] = ()
        self._folders: tuple[Folder, ...] = (self._default_folder(),)
        self._selected_note_id: str | None = None
        self._search = ""
        self._active_folder_id: str | None = None
        self._sort_by: str = "updated"
        self._error: str | None = None

        self._history = HistoryManager(
            HistorySnapshot(self._notes, self._folders), max_size=history_size
        )
        self._revision = 0
        self._listeners: list[Listener] = []

    # ------------------------------- State ----------------------------------

    @property
    def hydrated(self) -> bool:
        return self._hydrated

    @property
    def notes(self) -> tuple[Note, ...]:
        return self._notes

    @property
    def folders(self) -> tuple[Folder, ...]:
        return self._folders

    @property
    def selected_note_id(self) -> str | None:
        return self._selected_note_id

    @property
    def search(self) -> str:
        return self._search

    @property
    def active_folder_id(self) -> str | None:
        return self._active_folder_id

    @property
    def sort_by(self) -> str:
        return self._sort_by

    @property
    def error(self) -> str | None:
        """Last user-visible error message, or ``None``."""
        return self._error

    @property
    def history(self) -> HistoryManager:
        return self._history

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def id_factory(self) -> IdFactory:
        return self._new_id

    @property
    def revision(self) -> int:
        """Monotonic counter bumped on every state change."""
        return self._revision

    def document(self) -> ParcelDocument:
        """Return the current notes and folders as a persistable envelope."""
        return ParcelDocument(notes=self._notes, folders=self._folders)

    # ----------------------------- Listeners --------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for note/folder changes; return an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _touch(self) -> None:
        self._revision += 1

    def _set_document(
        self,
        notes: tuple[Note, ...] | None = None,
        folders: tuple[Folder, ...] | None = None,
    ) -> None:
        if notes is not None:
            self._notes = notes
        if folders is not None:
            self._folders = folders
        self._touch()
        for listener in list(self._listeners):
            listener(self)

    # ------------------------------ History ---------------------------------

    def _push_history(self) -> None:
        self._history.snapshot(self._notes, self._folders)

    @contextmanager
    def _tracked(self) -> Iterator[None]:
        """Bracket a mutation with before/after history snapshots."""
        self._push_history()
        yield
        self._push_history()

    def _restore(self, snap: HistorySnapshot) -> None:
        self._set_document(snap.notes, snap.folders)
        if views.find_note(self._notes, self._selected_note_id) is None:
            self._selected_note_id = self._first_note_id()

    def undo(self) -> None:
        """Step back one history entry; no-op at the oldest entry."""
        snap = self._history.undo()
        if snap is not None:
            self._restore(snap)

    def redo(self) -> None:
        """Step forward one history entry; no-op at the newest entry."""
        snap = self._history.redo()
        if snap is not None:
            self._restore(snap)

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def can_redo(self) -> bool:
        return self._history.can_redo()

    # ------------------------------- Views ----------------------------------

    def selected_note(self) -> Note | None:
        return views.find_note(self._notes, self._selected_note_id)

    def visible_notes(self) -> list[Note]:
        """Notes after folder filter, search and sort (pinned first)."""
        return views.visible_notes(
            self._notes,
            search=self._search,
            active_folder_id=self._active_folder_id,
            sort_by=self._sort_by,
        )

    # ------------------------------ UI state --------------------------------

    def select_note(self, note_id: str | None) -> None:
        """Select ``note_id``, or clear the selection with ``None``.

        An id that matches no note is ignored and the selection is unchanged.
        """
        if note_id is not None and views.find_note(self._notes, note_id) is None:
            logger.debug("Ignoring selection of unknown note %s", note_id)
            return
        self._selected_note_id = note_id
        self._touch()

    def set_search(self, query: str) -> None:
        self._search = query
        self._touch()

    def set_active_folder(self, folder_id: str | None) -> None:
        self._active_folder_id = folder_id
        self._touch()

    def set_sort_by(self, sort_by: SortOption | str) -> None:
        self._sort_by = sort_by
        self._touch()

    def set_error(self, message: str | None) -> None:
        self._error = message
        self._touch()

    def clear_error(self) -> None:
        self.set_error(None)

    # ------------------------------- Notes ----------------------------------

    def create_note(self, folder_id: str | None = None, color: NoteColor | None = None) -> Note:
        """
        Create a blank note at the head of the collection and select it.

        The folder is the first of: ``folder_id``, the active folder filter,
        the first folder, or ``None``.
        """
        with self._tracked():
            target = folder_id or self._active_folder_id or self._first_folder_id()
            note = make_note(
                target, color or DEFAULT_COLOR, clock=self._clock, id_factory=self._new_id
            )
            self._selected_note_id = note.id
            self._set_document(notes=(note, *self._notes))
        logger.debug("Created note %s in folder %s", note.id, target)
        return note

    def update_note(self, note_id: str, **patch: Any) -> Note | None:
        """
        Patch fields of a note and refresh its ``updated_at``.

        Parameters
        ----------
        note_id:
            Target note. If it does not exist the call does nothing.
        **patch:
            Any of ``title``, ``body``, ``folder_id``, ``pinned``, ``color``.

        Returns
        -------
        Note | None
            The updated note, or ``None`` when ``note_id`` is unknown.

        Raises
        ------
        TypeError
            If ``patch`` names a field that cannot be patched.
        pydantic.ValidationError
            If a patched value is invalid (e.g. an unknown color). Raised
            before any state or history change.
        """
        unknown = set(patch) - PATCHABLE_FIELDS
        if unknown:
            raise TypeError(f"update_note() got unpatchable field(s): {sorted(unknown)}")

        index = next((i for i, n in enumerate(self._notes) if n.id == note_id), None)
        if index is None:
            return None

        current = self._notes[index]
        updated = Note.model_validate(
            {
                **current.model_dump(),
                **patch,
                "updated_at": max(self._clock(), current.updated_at),
            }
        )
        notes = (*self._notes[:index], updated, *self._notes[index + 1 :])

        if TRACKED_FIELDS & patch.keys():
            with self._tracked():
                self._set_document(notes=notes)
        else:
            self._set_document(notes=notes)
        return updated

    def delete_note(self, note_id: str) -> None:
        """Remove a note; if it was selected, select the new first note."""
        with self._tracked():
            notes = tuple(n for n in self._notes if n.id != note_id)
            if self._selected_note_id == note_id:
                self._selected_note_id = notes[0].id if notes else None
            self._set_document(notes=notes)

    # ------------------------------ Folders ---------------------------------

    def create_folder(self, name: str) -> Folder:
        """Append a folder. The caller trims and validates ``name``."""
        with self._tracked():
            folder = make_folder(name, clock=self._clock, id_factory=self._new_id)
            self._set_document(folders=(*self._folders, folder))
        return folder

    def rename_folder(self, folder_id: str, name: str) -> None:
        with self._tracked():
            t = self._clock()
            folders = tuple(
                f.model_copy(update={"name": name, "updated_at": max(t, f.updated_at)})
                if f.id == folder_id
                else f
                for f in self._folders
            )
            self._set_document(folders=folders)

    def delete_folder(self, folder_id: str) -> None:
        """
        Remove a folder and unfile its notes.

        Notes in the folder get ``folder_id = None``; an active filter on the
        folder is cleared; if no folder remains, a default one is created.
        """
        with self._tracked():
            folders = tuple(f for f in self._folders if f.id != folder_id)
            if not folders:
                folders = (self._default_folder(),)
            notes = tuple(
                n.model_copy(update={"folder_id": None}) if n.folder_id == folder_id else n
                for n in self._notes
            )
            if self._active_folder_id == folder_id:
                self._active_folder_id = None
            self._set_document(notes=notes, folders=folders)

    # ----------------------------- Hydration --------------------------------

    def adopt(self, document: ParcelDocument, *, error: str | None = None) -> None:
        """
        Replace live state with ``document`` and mark the store hydrated.

        History is reset to a single entry holding the document, the first
        note (if any) is selected, and ``error`` becomes the visible message.
        """
        self._history.reset(HistorySnapshot.capture(document.notes, document.folders))
        self._selected_note_id = document.notes[0].id if document.notes else None
        self._error = error
        self._hydrated = True
        self._set_document(notes=tuple(document.notes), folders=tuple(document.folders))

    def empty_document(self) -> ParcelDocument:
        """A document with no notes and a single default folder."""
        return ParcelDocument(notes=(), folders=(self._default_folder(),))

    # ------------------------------ Helpers ---------------------------------

    def _default_folder(self) -> Folder:
        return make_default_folder(clock=self._clock, id_factory=self._new_id)

    def _first_folder_id(self) -> str | None:
        return self._folders[0].id if self._folders else None

    def _first_note_id(self) -> str | None:
        return self._notes[0].id if self._notes else None


__all__ = ["NotesStore", "PATCHABLE_FIELDS", "TRACKED_FIELDS"]
