import logging
from datetime import datetime, timezone
from typing import Iterable

from .records import VideoRecord

logger = logging.getLogger(__name__)

RECENT_TIER_HOURS = 24
RECENT_VIEWS_PER_HOUR = 10000
MINIMUM_TOTAL_VIEWS = 72000
MINIMUM_VIEWS_PER_HOUR = 1000
# Floor for the views-per-hour denominator; a zero or negative age would otherwise divide by zero.
MIN_AGE_HOURS = 1 / 60


def parse_iso8601_datetime(value: str):
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def filter_by_age(
    records: Iterable[VideoRecord],
    now: datetime | None = None,
    window_hours: float = 72,
) -> list[VideoRecord]:
    now = now or datetime.now(timezone.utc)
    kept = []
    for record in records:
        published_at = parse_iso8601_datetime(record.published_at)
        if published_at is None:
            logger.debug("Dropping %s: unparsable publishedAt %r", record.id, record.published_at)
            continue
        record.hours_since_published = (now - published_at).total_seconds() / 3600
        if record.hours_since_published <= window_hours:
            kept.append(record)
    return kept


def meets_virality_threshold(record: VideoRecord, views_per_hour: float) -> bool:
    if record.hours_since_published <= RECENT_TIER_HOURS:
        return views_per_hour >= RECENT_VIEWS_PER_HOUR
    return record.view_count >= MINIMUM_TOTAL_VIEWS and views_per_hour >= MINIMUM_VIEWS_PER_HOUR


def rank_by_virality(records: Iterable[VideoRecord]) -> list[VideoRecord]:
    ranked = []
    for record in records:
        views_per_hour = record.view_count / max(record.hours_since_published, MIN_AGE_HOURS)
        record.views_per_hour = round(views_per_hour)
        if meets_virality_threshold(record, views_per_hour):
            ranked.append(record)
    ranked.sort(key=lambda r: (-r.views_per_hour, r.id))
    return ranked
