"""Story filtering and display enrichment."""

from __future__ import annotations

import urllib.parse

from quiethn.models import DisplayItem, RawItem


def is_qualifying_story(item: RawItem) -> bool:
    """Only externally linked stories are shown; comments, jobs, polls and
    self-posts are not."""
    return item.type == "story" and item.url != ""


def enrich(item: RawItem) -> DisplayItem:
    """Attach the display host, e.g. ``example.com`` for ``http://www.example.com/x``."""
    host = ""
    try:
        hostname = urllib.parse.urlsplit(item.url).hostname
    except ValueError:
        hostname = None
    if hostname:
        host = hostname.removeprefix("www.")
    return DisplayItem(item=item, host=host)
