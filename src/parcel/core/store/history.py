"""
Bounded undo/redo history of full ``{notes, folders}`` snapshots.

The history is a linear stack with a cursor:

- ``snapshot(notes, folders)``: drop any redo branch past the cursor, append a
  new entry, evict the oldest entries beyond capacity, move the cursor to the
  end.
- ``undo()`` / ``redo()``: move the cursor one step and return the entry now
  under it, or ``None`` when there is nowhere to go.

Invariants
----------
- ``0 <= index < len(history)``
- ``len(history) <= max_size``
- right after a push, ``index == len(history) - 1``

Snapshots hold tuples of frozen models, so they are independent of live state
without a deep copy: nothing reachable from a snapshot can be mutated.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from parcel.core.contracts import Folder, Note

DEFAULT_HISTORY_SIZE = 50


@dataclass(frozen=True, slots=True)
class HistorySnapshot:
    """
    Immutable record of the notes and folders at one point in time.

    Attributes
    ----------
    notes : tuple[Note, ...]
        Notes in collection order.
    folders : tuple[Folder, ...]
        Folders in collection order.
    """

    notes: tuple[Note, ...]
    folders: tuple[Folder, ...]

    @classmethod
    def capture(cls, notes: Iterable[Note], folders: Iterable[Folder]) -> HistorySnapshot:
        """Build a snapshot from any iterables, freezing them into tuples."""
        return cls(notes=tuple(notes), folders=tuple(folders))


class HistoryManager:
    """
    Linear, capacity-bounded stack of :class:`HistorySnapshot` entries.

    Attributes
    ----------
    _entries : list[HistorySnapshot]
        The stack, oldest first.
    _index : int
        Position of the entry that matches live state.
    _max_size : int
        Capacity; the oldest entries are evicted first.
    """

    __slots__ = ("_entries", "_index", "_max_size")

    def __init__(
        self,
        initial: HistorySnapshot | None = None,
        *,
        max_size: int = DEFAULT_HISTORY_SIZE,
    ) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self._max_size = max_size
        self._entries: list[HistorySnapshot] = [initial or HistorySnapshot((), ())]
        self._index = 0

    # ------------------------------ Introspection ---------------------------

    @property
    def index(self) -> int:
        return self._index

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def current(self) -> HistorySnapshot:
        """The entry under the cursor."""
        return self._entries[self._index]

    def entries(self) -> tuple[HistorySnapshot, ...]:
        """Return all entries, oldest first (immutable tuple)."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    # ------------------------------ Mutation --------------------------------

    def reset(self, snapshot: HistorySnapshot) -> None:
        """Discard everything and seed the stack with ``snapshot`` at index 0."""
        self._entries = [snapshot]
        self._index = 0

    def snapshot(self, notes: Iterable[Note], folders: Iterable[Folder]) -> HistorySnapshot:
        """
        Push a snapshot of ``notes`` and ``folders``.

        Any entries after the cursor (a stale redo branch) are discarded first.
        If the stack then exceeds capacity, the oldest entry is evicted.

        Returns
        -------
        HistorySnapshot
            The entry that was pushed.
        """
        snap = HistorySnapshot.capture(notes, folders)
        del self._entries[self._index + 1 :]
        self._entries.append(snap)
        overflow = len(self._entries) - self._max_size
        if overflow > 0:
            del self._entries[:overflow]
        self._index = len(self._entries) - 1
        return snap

    def undo(self) -> HistorySnapshot | None:
        """Step back one entry; ``None`` if already at the oldest."""
        if not self.can_undo():
            return None
        self._index -= 1
        return self._entries[self._index]

    def redo(self) -> HistorySnapshot | None:
        """Step forward one entry; ``None`` if already at the newest."""
        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index]


__all__ = ["DEFAULT_HISTORY_SIZE", "HistoryManager", "HistorySnapshot"]
