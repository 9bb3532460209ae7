"""Storage backends and export formats for the notes document."""

from __future__ import annotations

from .export import export_json, export_markdown
from .json_backend import JsonFileBackend

__all__ = ["JsonFileBackend", "export_json", "export_markdown"]
