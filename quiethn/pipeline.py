"""Concurrent fetch of the current top HN stories, in rank order."""

from __future__ import annotations

import asyncio
import logging

from quiethn.errors import PipelineError, UpstreamError
from quiethn.hackernews import ItemSource
from quiethn.models import DisplayItem
from quiethn.stories import enrich, is_qualifying_story

logger = logging.getLogger(__name__)

# Fetches still running after the quota is met are left to finish, or are
# cancelled at shutdown by cancel_pending_fetches. Holding
# them here keeps them from being garbage collected mid-flight.
_pending_fetches: set[asyncio.Task] = set()


def oversample(count: int, available: int) -> int:
    """Number of candidates to fetch so that filtered or failed items still
    leave ``count`` stories."""
    return min(count * 5 // 4, available)


async def _fetch_one(
    source: ItemSource,
    index: int,
    item_id: int,
    results: asyncio.Queue,
) -> None:
    """Fetch one item and report exactly once: ``(index, DisplayItem)`` for a
    qualifying story, ``None`` for anything else."""
    outcome = None
    try:
        item = await source.get_item(item_id)
        if is_qualifying_story(item):
            outcome = (index, enrich(item))
    except UpstreamError as exc:
        logger.warning("Dropping HN item %s: %s", item_id, exc)
    except Exception as exc:
        logger.error("Unexpected error fetching HN item %s: %s", item_id, exc)
    finally:
        results.put_nowait(outcome)


async def cancel_pending_fetches() -> None:
    """Cancel item fetches left running by earlier pipelines and wait for them."""
    loop = asyncio.get_running_loop()
    tasks = [task for task in _pending_fetches if task.get_loop() is loop and not task.done()]
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


async def fetch_top_stories(source: ItemSource, count: int) -> list[DisplayItem]:
    """Fetch the top ``count`` linked stories in upstream rank order.

    Returns fewer than ``count`` stories when the oversampled window does not
    contain enough of them.  Raises PipelineError only if the ranked ID list
    itself cannot be fetched; individual item failures are dropped.
    """
    if count <= 0:
        return []

    try:
        ids = await source.top_items()
    except UpstreamError as exc:
        raise PipelineError(f"Could not list top stories: {exc}") from exc

    wanted = oversample(count, len(ids))
    results: asyncio.Queue = asyncio.Queue()
    for index, item_id in enumerate(ids[:wanted]):
        task = asyncio.create_task(_fetch_one(source, index, item_id, results))
        _pending_fetches.add(task)
        task.add_done_callback(_pending_fetches.discard)

    collected: list[tuple[int, DisplayItem]] = []
    reported = 0
    while len(collected) < count and reported < wanted:
        outcome = await results.get()
        reported += 1
        if outcome is not None:
            collected.append(outcome)

    collected.sort(key=lambda pair: pair[0])
    stories = [story for _, story in collected[:count]]
    logger.info("Fetched %d/%d top stories from %d candidates", len(stories), count, wanted)
    return stories
