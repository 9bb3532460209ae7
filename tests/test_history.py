"""Unit tests for the bounded undo/redo history stack."""

from __future__ import annotations

import pytest

from parcel.core.contracts import Folder
from parcel.core.store.history import HistoryManager, HistorySnapshot


def _folders(label: str) -> tuple[Folder, ...]:
    """A one-folder collection whose id identifies the snapshot."""
    return (Folder(id=label, name=label, created_at=0, updated_at=0),)


def _labels(history: HistoryManager) -> list[str]:
    return [snap.folders[0].id for snap in history.entries()]


def test_initial_state_has_single_entry() -> None:
    """A fresh stack holds one entry and can neither undo nor redo."""
    history = HistoryManager(HistorySnapshot((), _folders("s0")))
    assert len(history) == 1
    assert history.index == 0
    assert not history.can_undo()
    assert not history.can_redo()
    assert history.undo() is None
    assert history.redo() is None


def test_push_moves_cursor_to_end() -> None:
    """After every push the cursor sits on the newest entry."""
    history = HistoryManager(HistorySnapshot((), _folders("s0")))
    for label in ("a", "b", "c"):
        history.snapshot((), _folders(label))
        assert history.index == len(history) - 1
    assert _labels(history) == ["s0", "a", "b", "c"]


def test_undo_redo_walk_the_stack() -> None:
    """Undo and redo move one step and return the entry under the cursor."""
    history = HistoryManager(HistorySnapshot((), _folders("s0")))
    history.snapshot((), _folders("a"))
    history.snapshot((), _folders("b"))

    back = history.undo()
    assert back is not None and back.folders[0].id == "a"
    assert history.can_redo()

    forward = history.redo()
    assert forward is not None and forward.folders[0].id == "b"
    assert not history.can_redo()


def test_capacity_evicts_oldest_and_keeps_order() -> None:
    """Pushing the 51st entry evicts exactly the oldest one."""
    history = HistoryManager(HistorySnapshot((), _folders("s0")), max_size=50)
    for i in range(1, 50):
        history.snapshot((), _folders(f"s{i}"))
    assert len(history) == 50
    assert _labels(history)[0] == "s0"

    history.snapshot((), _folders("s50"))
    assert len(history) == 50
    assert _labels(history) == [f"s{i}" for i in range(1, 51)]
    assert history.index == 49


def test_capacity_never_exceeded_under_many_pushes() -> None:
    history = HistoryManager(max_size=5)
    for i in range(100):
        history.snapshot((), _folders(f"s{i}"))
        assert len(history) <= 5
        assert 0 <= history.index < len(history)
    assert _labels(history) == ["s95", "s96", "s97", "s98", "s99"]


def test_push_after_undo_discards_redo_branch() -> None:
    """A new snapshot after undo truncates everything beyond the cursor."""
    history = HistoryManager(HistorySnapshot((), _folders("s0")))
    for label in ("a", "b", "c"):
        history.snapshot((), _folders(label))
    history.undo()
    history.undo()

    history.snapshot((), _folders("d"))
    assert _labels(history) == ["s0", "a", "d"]
    assert not history.can_redo()


def test_reset_reseeds_single_entry() -> None:
    history = HistoryManager()
    history.snapshot((), _folders("a"))
    history.reset(HistorySnapshot((), _folders("fresh")))
    assert _labels(history) == ["fresh"]
    assert history.index == 0


def test_snapshot_is_independent_of_source_list() -> None:
    """Mutating the list passed to ``snapshot`` does not alter the entry."""
    history = HistoryManager()
    live = list(_folders("a"))
    snap = history.snapshot([], live)
    live.append(Folder(id="b", name="b", created_at=0, updated_at=0))
    assert [f.id for f in snap.folders] == ["a"]


def test_invalid_capacity_rejected() -> None:
    with pytest.raises(ValueError):
        HistoryManager(max_size=0)
