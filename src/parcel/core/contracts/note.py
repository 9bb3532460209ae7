"""Note, Folder and document envelope contracts.

This module defines the Pydantic v2 models that make up the persisted notes
document and the live state of the store:

- `Note`          : a short user document with folder, pin flag and color tag.
- `Folder`        : a named grouping container for notes.
- `ParcelDocument`: the ``{version, notes, folders}`` envelope written to disk.

Wire format
-----------
The on-disk JSON uses camelCase keys (``folderId``, ``createdAt``,
``updatedAt``). Models accept both the alias and the Python field name, and
serialize with aliases via :meth:`ParcelDocument.to_payload`.

Immutability
------------
All models are frozen and collections are tuples. Changing a note means
building a new `Note` and a new tuple, so history snapshots can hold the same
objects as live state without any risk of later mutation leaking into them.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

NoteColor = Literal["paper", "yellow", "mint", "lavender", "salmon", "sky"]
SortOption = Literal["updated", "created", "title"]

#: The closed set of color tags, in display order.
NOTE_COLORS: tuple[str, ...] = ("paper", "yellow", "mint", "lavender", "salmon", "sky")
DEFAULT_COLOR: NoteColor = "paper"
DEFAULT_FOLDER_NAME = "Notes"
DOCUMENT_VERSION = 1


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Folder(_Frozen):
    """A named grouping container for notes."""

    id: str = Field(min_length=1, description="Opaque unique identifier.")
    name: str = Field(description="Display name; non-empty after trimming.")
    created_at: int = Field(alias="createdAt", description="Epoch milliseconds.")
    updated_at: int = Field(alias="updatedAt", description="Epoch milliseconds.")


class Note(_Frozen):
    """A single note.

    Fields
    ------
    id : str
        Opaque unique identifier.
    title, body : str
        Free text; both may be empty (a new note starts blank).
    folder_id : str | None
        Owning folder, or ``None`` for an unfiled note.
    pinned : bool
        Pinned notes sort ahead of all unpinned notes.
    color : NoteColor
        One of the six color tags.
    created_at, updated_at : int
        Epoch milliseconds; ``updated_at`` never decreases.
    """

    id: str = Field(min_length=1)
    title: str = ""
    body: str = ""
    folder_id: str | None = Field(default=None, alias="folderId")
    pinned: bool = False
    color: NoteColor = DEFAULT_COLOR
    created_at: int = Field(alias="createdAt")
    updated_at: int = Field(alias="updatedAt")


class ParcelDocument(_Frozen):
    """The persisted envelope: ``{"version": 1, "notes": [...], "folders": [...]}``."""

    version: Literal[1] = DOCUMENT_VERSION
    notes: tuple[Note, ...] = ()
    folders: tuple[Folder, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-compatible dict written by storage backends."""
        return self.model_dump(by_alias=True, mode="json")


__all__ = [
    "NoteColor",
    "SortOption",
    "NOTE_COLORS",
    "DEFAULT_COLOR",
    "DEFAULT_FOLDER_NAME",
    "DOCUMENT_VERSION",
    "Folder",
    "Note",
    "ParcelDocument",
]
