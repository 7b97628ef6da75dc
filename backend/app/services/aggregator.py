import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from . import youtube_client
from .credentials import CredentialRotator
from .records import VideoRecord, normalize_video
from .settings import RadarSettings

logger = logging.getLogger(__name__)

TRENDING_MAX_RESULTS = 50
KEYWORD_MAX_RESULTS = 10
TECH_KEYWORDS = [
    "tech news india",
    "tech india",
    "indian tech news",
    "tech review india",
    "tech hindi",
    "tech tamil",
    "tech telugu",
    "tech kannada",
    "indian tech channel",
]

OUTCOME_OK = "ok"
OUTCOME_EMPTY = "empty"
OUTCOME_QUOTA_SKIPPED = "quota_skipped"
OUTCOME_FAILED = "failed"


class AggregationError(RuntimeError):
    """Raised when the run cannot gather its base set of videos."""


class VideoStore:
    """Videos keyed by id. put() is last-write-wins: a repeated id replaces the earlier record."""

    def __init__(self):
        self._records: dict[str, VideoRecord] = {}

    def put(self, record: VideoRecord) -> None:
        self._records[record.id] = record

    def get(self, video_id: str) -> VideoRecord | None:
        return self._records.get(video_id)

    def values(self) -> list[VideoRecord]:
        return list(self._records.values())

    def __len__(self) -> int:
        return len(self._records)


@dataclass
class KeywordOutcome:
    keyword: str
    status: str
    fetched: int = 0
    reason: str | None = None


@dataclass
class AggregationResult:
    videos: list[VideoRecord]
    trending_count: int = 0
    outcomes: list[KeywordOutcome] = field(default_factory=list)


def store_items(items: list[dict], store: VideoStore) -> int:
    stored = 0
    for item in items:
        record = normalize_video(item)
        if record is None:
            logger.debug("Skipping item without an id: %r", item)
            continue
        store.put(record)
        stored += 1
    return stored


def fetch_trending(settings: RadarSettings, rotator: CredentialRotator, store: VideoStore) -> int:
    try:
        items = youtube_client.list_trending(
            rotator.active,
            settings.region_code,
            settings.category_id,
            max_results=TRENDING_MAX_RESULTS,
            timeout=settings.request_timeout,
        )
    except youtube_client.YouTubeAPIError as exc:
        logger.error("Trending fetch failed for region=%s category=%s: %s",
                     settings.region_code, settings.category_id, exc)
        raise AggregationError("Failed to fetch trending videos") from exc
    return store_items(items, store)


def fetch_keyword(
    keyword: str,
    settings: RadarSettings,
    rotator: CredentialRotator,
    store: VideoStore,
    published_after: datetime,
) -> KeywordOutcome:
    try:
        video_ids = youtube_client.search_video_ids(
            rotator.active,
            keyword,
            settings.region_code,
            published_after,
            max_results=KEYWORD_MAX_RESULTS,
            timeout=settings.request_timeout,
        )
        if not video_ids:
            return KeywordOutcome(keyword, OUTCOME_EMPTY)
        items = youtube_client.list_by_ids(rotator.active, video_ids, timeout=settings.request_timeout)
    except youtube_client.YouTubeQuotaExceededError as exc:
        # Not retried with the other key; the keyword is lost for this run.
        rotator.rotate()
        logger.warning("Quota exceeded while searching '%s'; rotated API key and skipped keyword", keyword)
        return KeywordOutcome(keyword, OUTCOME_QUOTA_SKIPPED, reason=str(exc))
    except youtube_client.YouTubeAPIError as exc:
        logger.warning("Error searching for keyword '%s': %s", keyword, exc)
        return KeywordOutcome(keyword, OUTCOME_FAILED, reason=str(exc))
    except Exception as exc:
        logger.exception("Unexpected error processing keyword '%s'", keyword)
        return KeywordOutcome(keyword, OUTCOME_FAILED, reason=f"{exc.__class__.__name__}: {exc}")
    return KeywordOutcome(keyword, OUTCOME_OK, fetched=store_items(items, store))


def aggregate_videos(
    settings: RadarSettings,
    rotator: CredentialRotator,
    now: datetime | None = None,
    keywords: list[str] | None = None,
) -> AggregationResult:
    now = now or datetime.now(timezone.utc)
    published_after = now - timedelta(hours=settings.window_hours)
    store = VideoStore()

    trending_count = fetch_trending(settings, rotator, store)
    logger.info("Trending chart returned %d videos", trending_count)

    outcomes = [
        fetch_keyword(keyword, settings, rotator, store, published_after)
        for keyword in (TECH_KEYWORDS if keywords is None else keywords)
    ]
    return AggregationResult(videos=store.values(), trending_count=trending_count, outcomes=outcomes)
