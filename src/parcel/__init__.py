"""Parcel: a local note-taking state store with undo/redo and JSON persistence."""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
