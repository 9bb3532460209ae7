"""
Debounced autosave for a hydrated :class:`NotesStore`.

The scheduler listens for note/folder changes and saves once edits have been
quiet for ``delay_ms``. Hosts should also call :meth:`AutosaveScheduler.flush`
whenever the window loses focus, is hidden, or is about to close, so that no
edit is left only in memory.

Usage
-----
>>> async with AutosaveScheduler(gateway, delay_ms=600) as autosave:
...     store.update_note(note_id, title="Groceries")
...     await autosave.flush()
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from types import TracebackType

from parcel.core.settings import get_logger, load_settings

from .notes_store import NotesStore
from .persistence import PersistenceGateway

logger = get_logger(__name__)


class AutosaveScheduler:
    """Coalesce bursts of store changes into one save per quiet period."""

    def __init__(self, gateway: PersistenceGateway, *, delay_ms: int | None = None) -> None:
        if delay_ms is None:
            delay_ms = load_settings().autosave_delay_ms
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be non-negative, got {delay_ms}")
        self.gateway = gateway
        self.delay_ms = delay_ms
        self._loop: asyncio.AbstractEventLoop | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[bool]] = set()
        self._unsubscribe: Callable[[], None] | None = None

    # ------------------------------ Lifecycle -------------------------------

    def start(self) -> None:
        """Subscribe to the store. Must be called from a running event loop."""
        if self._unsubscribe is not None:
            return
        self._loop = asyncio.get_running_loop()
        self._unsubscribe = self.gateway.store.subscribe(self._on_change)

    def close(self) -> None:
        """Unsubscribe and drop any pending (not yet started) save."""
        self._cancel_timer()
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._unsubscribe = None

    async def __aenter__(self) -> AutosaveScheduler:
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            await self.flush()
            await self.drain()
        finally:
            self.close()

    # ------------------------------- State ----------------------------------

    @property
    def pending(self) -> bool:
        """True while a debounced save is waiting to fire."""
        return self._timer is not None

    # ------------------------------ Triggers --------------------------------

    def _on_change(self, store: NotesStore) -> None:
        if not store.hydrated or self._loop is None:
            return
        self._cancel_timer()
        self._timer = self._loop.call_later(self.delay_ms / 1000, self._fire, self._loop)

    def _fire(self, loop: asyncio.AbstractEventLoop) -> None:
        self._timer = None
        task = loop.create_task(self.gateway.save())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def flush(self) -> bool:
        """Cancel any pending debounce and save now.

        Returns ``False`` without saving if the store has not been hydrated
        (saving then would overwrite the document with defaults).
        """
        self._cancel_timer()
        if not self.gateway.store.hydrated:
            logger.debug("Skipping flush: store not hydrated yet")
            return False
        return await self.gateway.save()

    async def drain(self) -> None:
        """Wait for saves already started by the debounce timer."""
        if self._tasks:
            await asyncio.gather(*self._tasks)


__all__ = ["AutosaveScheduler"]
