"""Core package initializer for Parcel.

Downstream code imports from the subpackages directly:
    from parcel.core.settings import settings, load_settings, Settings, get_logger
    from parcel.core.store import NotesStore, PersistenceGateway
"""

from __future__ import annotations

__all__ = ["__doc__"]
