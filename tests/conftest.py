"""Shared fakes standing in for the Hacker News API."""

from __future__ import annotations

import asyncio

import pytest

from quiethn.errors import UpstreamError
from quiethn.models import RawItem


def story(item_id: int, url: str | None = None, type: str = "story") -> dict:
    return {
        "id": item_id,
        "type": type,
        "title": f"Story {item_id}",
        "url": f"https://www.site{item_id}.com/post" if url is None else url,
        "by": "pg",
        "score": item_id,
        "descendants": 0,
        "time": 1700000000,
    }


class FakeSource:
    """In-memory ItemSource with per-item latency and failure injection."""

    def __init__(self, ids, items, delays=None, failing=(), list_error=False, list_delay=0):
        self.ids = list(ids)
        self.items = items
        self.delays = delays or {}
        self.failing = set(failing)
        self.list_error = list_error
        self.list_delay = list_delay
        self.list_calls = 0
        self.item_calls: list[int] = []

    async def top_items(self) -> list[int]:
        self.list_calls += 1
        await asyncio.sleep(self.list_delay)
        if self.list_error:
            raise UpstreamError("topstories unavailable")
        return list(self.ids)

    async def get_item(self, item_id: int) -> RawItem:
        self.item_calls.append(item_id)
        await asyncio.sleep(self.delays.get(item_id, 0))
        if item_id in self.failing:
            raise UpstreamError(f"item {item_id} timed out")
        return RawItem.from_api(self.items[item_id])


@pytest.fixture
def make_source():
    return FakeSource


@pytest.fixture
def make_story():
    return story
