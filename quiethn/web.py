"""FastAPI app serving the cached top stories."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse
from jinja2 import Environment, FileSystemLoader, select_autoescape

from quiethn.cache import StoryCache
from quiethn.config import Settings, settings as default_settings
from quiethn.errors import PipelineError
from quiethn.hackernews import HackerNewsClient, ItemSource
from quiethn.models import DisplayItem
from quiethn.pipeline import cancel_pending_fetches

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

_templates = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)


def _story_json(story: DisplayItem) -> dict:
    return {
        "id": story.id,
        "title": story.title,
        "url": story.url,
        "host": story.host,
        "by": story.item.by,
        "score": story.item.score,
        "descendants": story.item.descendants,
    }


def create_app(settings: Settings | None = None, source: ItemSource | None = None) -> FastAPI:
    """Build the app.  ``source`` replaces the live HN client, e.g. in tests."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = None
        item_source = source
        if item_source is None:
            client = HackerNewsClient(base_url=settings.hn_base_url, timeout=settings.request_timeout)
            item_source = client
        cache = StoryCache(item_source, settings.num_stories, settings.cache_ttl_seconds)
        cache.start()
        app.state.cache = cache
        logger.info("Serving top %d stories, cached for %.1fs", settings.num_stories, settings.cache_ttl_seconds)
        try:
            yield
        finally:
            await cache.stop()
            await cancel_pending_fetches()
            if client is not None:
                await client.aclose()

    app = FastAPI(title="Quiet Hacker News", lifespan=lifespan)

    async def _load_stories(request: Request) -> list[DisplayItem]:
        try:
            return await request.app.state.cache.get_stories()
        except PipelineError as exc:
            logger.error("Failed to load top stories: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to load top stories") from exc

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request):
        start = time.perf_counter()
        stories = await _load_stories(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        html = _templates.get_template("index.html").render(stories=stories, elapsed_ms=elapsed_ms)
        return HTMLResponse(html)

    @app.get("/stories.json")
    async def stories_json(request: Request):
        stories = await _load_stories(request)
        return [_story_json(story) for story in stories]

    return app
