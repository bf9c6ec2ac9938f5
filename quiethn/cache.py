"""Time-bounded cache of the top stories with a background refresher."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from quiethn.hackernews import ItemSource
from quiethn.models import CacheEntry, DisplayItem
from quiethn.pipeline import fetch_top_stories

logger = logging.getLogger(__name__)


class StoryCache:
    """Serves the last fetched story list until it expires.

    The entry is only ever replaced as a whole by ``refresh``, and refreshes
    run one at a time under a single lock.  A failed refresh keeps the old
    entry, so stale stories stay servable.
    """

    def __init__(
        self,
        source: ItemSource,
        num_stories: int,
        life_duration: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.source = source
        self.num_stories = num_stories
        self.life_duration = life_duration
        self._clock = clock
        self._entry = CacheEntry(items=(), expires_at=clock())
        self._lock = asyncio.Lock()
        self._refresher: asyncio.Task | None = None

    @property
    def entry(self) -> CacheEntry:
        return self._entry

    @property
    def expired(self) -> bool:
        return self._clock() >= self._entry.expires_at

    async def get_stories(self) -> list[DisplayItem]:
        """Return cached stories, refreshing first if they have expired.

        Raises PipelineError when that refresh fails.
        """
        entry = self._entry
        if self._clock() < entry.expires_at:
            return list(entry.items)
        return await self.refresh()

    async def refresh(self) -> list[DisplayItem]:
        """Fetch and store a new story list.

        On PipelineError the current entry is left as it was.
        """
        async with self._lock:
            stories = await fetch_top_stories(self.source, self.num_stories)
            self._entry = CacheEntry(
                items=tuple(stories),
                expires_at=self._clock() + self.life_duration,
            )
            logger.info("Cached %d stories for %.1fs", len(stories), self.life_duration)
            return stories

    async def _refresh_forever(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self.life_duration / 2
        next_tick = loop.time()
        while True:
            try:
                await self.refresh()
            except Exception as exc:
                logger.error("Background story refresh failed, serving cached stories: %s", exc)
            # Ticks keep a fixed phase; ticks missed by a slow refresh are skipped.
            next_tick += interval
            now = loop.time()
            while next_tick < now:
                next_tick += interval
            await asyncio.sleep(next_tick - now)

    def start(self) -> None:
        """Start the background refresher on the running event loop."""
        if self._refresher is None or self._refresher.done():
            self._refresher = asyncio.create_task(self._refresh_forever())

    async def stop(self) -> None:
        if self._refresher is None:
            return
        self._refresher.cancel()
        try:
            await self._refresher
        except asyncio.CancelledError:
            pass
        self._refresher = None
