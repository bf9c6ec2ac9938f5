from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class RawItem:
    id: int
    type: str
    url: str = ""
    title: str = ""
    by: str = ""
    score: int = 0
    descendants: int = 0
    time: int = 0
    raw_data: dict = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict) -> RawItem:
        return cls(
            id=int(data["id"]),
            type=data.get("type", ""),
            url=data.get("url") or "",
            title=data.get("title", ""),
            by=data.get("by", ""),
            score=int(data.get("score", 0)),
            descendants=int(data.get("descendants", 0)),
            time=int(data.get("time", 0)),
            raw_data=data,
        )


@dataclass(frozen=True)
class DisplayItem:
    item: RawItem
    host: str = ""

    @property
    def id(self) -> int:
        return self.item.id

    @property
    def url(self) -> str:
        return self.item.url

    @property
    def title(self) -> str:
        return self.item.title


@dataclass(frozen=True)
class CacheEntry:
    items: tuple[DisplayItem, ...]
    expires_at: float
