"""JSON file storage backend for the notes document.

Layout
------
- Directory: ``<data_dir>/parcel/``
- Document:  ``notes.json`` (pretty-printed, UTF-8, camelCase keys)
- Backup:    ``notes.json.bak`` (previous document, refreshed on every save)

Writes go to ``notes.json.tmp`` first and are moved into place with
``os.replace`` so a reader never sees a half-written file. Blocking file I/O
runs in a worker thread via :func:`asyncio.to_thread`.
"""

from __future__ import annotations

import asyncio
import json
import os
import shutil
from pathlib import Path
from typing import Any

from parcel.core.contracts import DOCUMENT_VERSION, ParcelDocument
from parcel.core.errors import CorruptionError, SaveError
from parcel.core.settings import get_logger, load_settings

logger = get_logger(__name__)

APP_DIR_NAME = "parcel"
DOCUMENT_FILE = "notes.json"
#: Highest document version this build accepts on load.
MAX_SUPPORTED_VERSION = 10


def _empty_payload() -> dict[str, Any]:
    return {"version": DOCUMENT_VERSION, "notes": [], "folders": []}


def _check_payload(data: Any) -> dict[str, Any]:
    """Reject payloads whose shape cannot be a notes document."""
    if not isinstance(data, dict):
        raise CorruptionError(
            f"Expected a JSON object at the top level, got {type(data).__name__}."
        )
    version = data.get("version", DOCUMENT_VERSION)
    if isinstance(version, bool) or not isinstance(version, int):
        raise CorruptionError(f"Invalid data version: {version!r}.")
    if not 1 <= version <= MAX_SUPPORTED_VERSION:
        raise CorruptionError(
            f"Invalid data version: {version}. Expected 1-{MAX_SUPPORTED_VERSION}."
        )
    return data


class JsonFileBackend:
    """Persist the notes document as a single JSON file."""

    def __init__(self, data_dir: Path | None = None) -> None:
        base = data_dir if data_dir is not None else load_settings().data_dir
        self.data_dir: Path = Path(base).expanduser()

    @property
    def data_path(self) -> Path:
        """Directory that holds the document and its backup."""
        return self.data_dir / APP_DIR_NAME

    @property
    def document_path(self) -> Path:
        return self.data_path / DOCUMENT_FILE

    # ------------------------------- Load -----------------------------------

    def read(self) -> dict[str, Any]:
        """
        Read and structurally check the document (blocking).

        A missing file yields an empty document: the first run is not an
        error. An existing file that cannot be read, decoded or parsed raises
        :class:`CorruptionError`, so the gateway never mistakes it for a first
        run and a later save does not silently replace it.
        """
        path = self.document_path
        if not path.exists():
            logger.info("No document at %s; treating as first run", path)
            return _empty_payload()

        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise CorruptionError(f"Could not read {path}: {exc}.") from exc

        try:
            data = json.loads(raw.decode("utf-8"))
        except ValueError as exc:
            # UnicodeDecodeError and JSONDecodeError are both ValueErrors.
            raise CorruptionError(f"Failed to parse JSON: {exc}. File may be corrupt.") from exc
        return _check_payload(data)

    async def load(self) -> dict[str, Any]:
        return await asyncio.to_thread(self.read)

    # ------------------------------- Save -----------------------------------

    def write(self, document: ParcelDocument) -> Path:
        """Write ``document`` atomically, keeping a backup of the old file (blocking)."""
        path = self.document_path
        tmp_path = path.with_name(f"{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if path.exists():
                try:
                    shutil.copyfile(path, path.with_name(f"{path.name}.bak"))
                except OSError as exc:
                    logger.warning("Could not back up %s: %s", path, exc)

            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(document.to_payload(), f, ensure_ascii=False, indent=2)
                f.write("\n")
            os.replace(tmp_path, path)
        except OSError as exc:
            raise SaveError(f"Could not write {path}: {exc}") from exc
        return path

    async def save(self, document: ParcelDocument) -> None:
        await asyncio.to_thread(self.write, document)


__all__ = ["APP_DIR_NAME", "DOCUMENT_FILE", "MAX_SUPPORTED_VERSION", "JsonFileBackend"]
