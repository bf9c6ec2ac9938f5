"""Hacker News item source via the Firebase API."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from quiethn.config import settings
from quiethn.errors import UpstreamError
from quiethn.models import RawItem

logger = logging.getLogger(__name__)


class ItemSource(Protocol):
    async def top_items(self) -> list[int]: ...

    async def get_item(self, item_id: int) -> RawItem: ...


class HackerNewsClient:
    """Thin async wrapper over the two HN endpoints the pipeline needs.

    Holds no state besides the underlying connection pool, so a single
    instance can serve many concurrent fetches.  Nothing is retried here.
    """

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        self.base_url = (base_url or settings.hn_base_url).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout or settings.request_timeout)

    async def _get_json(self, path: str):
        url = f"{self.base_url}/{path}"
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
            return resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamError(f"GET {url} failed: {exc}") from exc

    async def top_items(self) -> list[int]:
        """Return the top item IDs in HN rank order."""
        data = await self._get_json("topstories.json")
        if not isinstance(data, list):
            raise UpstreamError(f"Unexpected topstories payload: {type(data).__name__}")
        try:
            return [int(item_id) for item_id in data]
        except (TypeError, ValueError) as exc:
            raise UpstreamError(f"Malformed topstories payload: {exc}") from exc

    async def get_item(self, item_id: int) -> RawItem:
        data = await self._get_json(f"item/{item_id}.json")
        if not isinstance(data, dict):
            # The API answers deleted or unknown items with a literal null.
            raise UpstreamError(f"HN item {item_id} not found")
        try:
            return RawItem.from_api(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamError(f"Malformed HN item {item_id}: {exc}") from exc

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HackerNewsClient:
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()
