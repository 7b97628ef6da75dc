import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence

from . import telegram
from .aggregator import KeywordOutcome, aggregate_videos
from .classifier import classify_videos
from .credentials import CredentialRotator
from .records import VideoRecord
from .report import pack_report
from .settings import RadarSettings
from .virality import filter_by_age, rank_by_virality

logger = logging.getLogger(__name__)


@dataclass
class RadarResult:
    videos: list[VideoRecord]
    candidates: int = 0
    classified: int = 0
    recent: int = 0
    outcomes: list[KeywordOutcome] = field(default_factory=list)
    report_sent: bool = False
    delivery_error: str | None = None

    @property
    def stage_counts(self) -> dict[str, int]:
        return {
            "candidates": self.candidates,
            "classified": self.classified,
            "recent": self.recent,
            "viral": len(self.videos),
        }


def presentation_items(videos: Sequence[VideoRecord]) -> list[dict[str, Any]]:
    return [
        {
            "title": v.title,
            "channelTitle": v.channel_title,
            "viewCount": v.view_count,
            "viewsPerHour": v.views_per_hour,
            "hoursSincePublished": v.hours_since_published,
            "url": v.url,
        }
        for v in videos
    ]


def deliver_report(videos: Sequence[VideoRecord], settings: RadarSettings, result: RadarResult) -> None:
    block = pack_report(videos, settings)
    if block.omitted:
        logger.info("Report full: omitted %d lower-ranked video(s)", block.omitted)
    try:
        telegram.send_report(
            settings.telegram_bot_token,
            settings.telegram_chat_id,
            block.text,
            timeout=settings.request_timeout,
        )
    except telegram.NotificationError as exc:
        logger.error("Error sending Telegram report: %s", exc)
        result.delivery_error = str(exc)
        return
    result.report_sent = True


def run_radar(settings: RadarSettings, now: datetime | None = None, send: bool = True) -> RadarResult:
    """
    One discovery run: aggregate, classify, age-filter, rank, then report.
    AggregationError propagates; a failed Telegram delivery does not.
    """
    now = now or datetime.now(timezone.utc)
    logger.info("Starting viral video run (region=%s, category=%s, window=%dh)",
                settings.region_code, settings.category_id, settings.window_hours)

    rotator = CredentialRotator(settings.youtube_api_key, settings.youtube_api_key_2)
    aggregated = aggregate_videos(settings, rotator, now=now)
    statuses = Counter(outcome.status for outcome in aggregated.outcomes)
    logger.info("Collected %d unique videos; keyword outcomes: %s",
                len(aggregated.videos), dict(statuses))

    classified = classify_videos(aggregated.videos)
    recent = filter_by_age(classified, now=now, window_hours=settings.window_hours)
    viral = rank_by_virality(recent)
    logger.info("Classified %d, recent %d, viral %d", len(classified), len(recent), len(viral))

    result = RadarResult(
        videos=viral,
        candidates=len(aggregated.videos),
        classified=len(classified),
        recent=len(recent),
        outcomes=aggregated.outcomes,
    )

    if not viral:
        logger.info("No new viral videos to report on Telegram.")
    elif not send:
        logger.info("Notification disabled for this run")
    elif not settings.telegram_enabled:
        logger.warning("TELEGRAM_BOT_TOKEN or TELEGRAM_CHAT_ID missing; report not sent")
    else:
        deliver_report(viral, settings, result)
    return result
