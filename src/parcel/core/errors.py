"""Exception hierarchy shared by the store and the storage backends.

The store never lets these escape to the host: the persistence gateway
converts them into either a silent recovery or a message on ``store.error``.
Backends raise them so the gateway can tell a first run from a damaged file.
"""

from __future__ import annotations


class ParcelError(Exception):
    """Base class for all Parcel errors."""


class StorageError(ParcelError):
    """The storage backend could not complete an I/O operation."""


class CorruptionError(StorageError):
    """The persisted document exists but cannot be parsed or validated.

    Messages always contain the word "corrupt" so that message-based
    classification in the gateway recognizes them.
    """

    def __init__(self, message: str) -> None:
        if "corrupt" not in message.lower():
            message = f"{message} File may be corrupt."
        super().__init__(message)


class SaveError(StorageError):
    """Writing the document to storage failed."""


__all__ = [
    "ParcelError",
    "StorageError",
    "CorruptionError",
    "SaveError",
]
