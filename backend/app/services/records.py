from dataclasses import dataclass
from typing import Any

from .durations import parse_duration

MISSING_TEXT = "N/A"
SHORTS_MAX_SECONDS = 60


@dataclass
class VideoRecord:
    """One candidate video; later pipeline stages fill in the derived metrics."""

    id: str
    title: str = MISSING_TEXT
    channel_title: str = MISSING_TEXT
    description: str = ""
    view_count: int = 0
    published_at: str = ""
    duration_seconds: float = 0
    locale_score: int = 0
    topic_score: int = 0
    hours_since_published: float = 0.0
    views_per_hour: int = 0

    @property
    def is_short(self) -> bool:
        return self.duration_seconds <= SHORTS_MAX_SECONDS

    @property
    def url(self) -> str:
        if self.is_short:
            return f"https://www.youtube.com/shorts/{self.id}"
        return f"https://www.youtube.com/watch?v={self.id}"


def parse_view_count(value: Any) -> int:
    try:
        count = int(value or 0)
    except (TypeError, ValueError):
        return 0
    return max(count, 0)


def _text(value: Any, default: str) -> str:
    if isinstance(value, str) and value:
        return value
    return default


def _section(item: dict, key: str) -> dict:
    value = item.get(key)
    return value if isinstance(value, dict) else {}


def normalize_video(item: Any) -> VideoRecord | None:
    """
    Build a record from a raw videos.list item.
    Missing or malformed fields fall back to defaults; only an item
    without an id is rejected.
    """
    if not isinstance(item, dict):
        return None
    video_id = item.get("id")
    if not isinstance(video_id, str) or not video_id:
        return None

    snip = _section(item, "snippet")
    stats = _section(item, "statistics")
    details = _section(item, "contentDetails")

    return VideoRecord(
        id=video_id,
        title=_text(snip.get("title"), MISSING_TEXT),
        channel_title=_text(snip.get("channelTitle"), MISSING_TEXT),
        description=_text(snip.get("description"), ""),
        view_count=parse_view_count(stats.get("viewCount")),
        published_at=_text(snip.get("publishedAt"), ""),
        duration_seconds=parse_duration(details.get("duration") or "PT0S"),
    )
