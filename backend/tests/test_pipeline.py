from datetime import datetime, timedelta, timezone

import pytest

from backend.app.services import pipeline, telegram, youtube_client
from backend.app.services.aggregator import AggregationError
from backend.app.services.settings import RadarSettings

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
SETTINGS = RadarSettings(
    youtube_api_key="key-a",
    youtube_api_key_2="key-b",
    telegram_bot_token="TOKEN",
    telegram_chat_id="CHAT",
)


def make_video(video_id, hours_ago, views, title, channel="Channel", duration="PT5M"):
    published_at = (NOW - timedelta(hours=hours_ago)).isoformat().replace("+00:00", "Z")
    return {
        "id": video_id,
        "snippet": {
            "title": title,
            "channelTitle": channel,
            "description": "",
            "publishedAt": published_at,
        },
        "statistics": {"viewCount": str(views)},
        "contentDetails": {"duration": duration},
    }


def use_trending(monkeypatch, items):
    def fake_get(url, params, timeout=15):
        if params.get("chart") == "mostPopular":
            return {"items": items}
        return {"items": []}

    monkeypatch.setattr(youtube_client, "youtube_api_get", fake_get)


def capture_reports(monkeypatch):
    sent = []
    monkeypatch.setattr(telegram, "send_report", lambda token, chat, text, timeout=15: sent.append(text))
    return sent


def test_only_locale_and_topic_matches_survive(monkeypatch):
    use_trending(monkeypatch, [
        # locale 2 ("india", "mumbai"), topic 0
        make_video("locale_only", 2, 500000, "India Mumbai vlog", channel="Travel"),
        # locale 1 ("delhi"), topic 3 ("smartphone", "review", "unboxing")
        make_video("tech", 2, 500000, "Smartphone review unboxing", channel="Delhi Channel"),
    ])
    sent = capture_reports(monkeypatch)

    result = pipeline.run_radar(SETTINGS, now=NOW)

    assert [v.id for v in result.videos] == ["tech"]
    assert result.videos[0].locale_score == 1
    assert result.videos[0].topic_score == 3
    assert result.stage_counts == {"candidates": 2, "classified": 1, "recent": 1, "viral": 1}
    assert result.report_sent is True
    assert len(sent) == 1
    assert "Smartphone review unboxing" in sent[0]


def test_age_and_virality_filters_apply(monkeypatch):
    use_trending(monkeypatch, [
        make_video("fresh", 2, 20000, "Tech India"),
        make_video("slow_fresh", 2, 19000, "Tech India"),
        make_video("day_old", 30, 80000, "Tech India"),
        make_video("too_old", 80, 9000000, "Tech India"),
    ])
    capture_reports(monkeypatch)

    result = pipeline.run_radar(SETTINGS, now=NOW)

    assert [v.id for v in result.videos] == ["fresh", "day_old"]
    assert [v.views_per_hour for v in result.videos] == [10000, 2667]
    assert result.recent == 3


def test_no_viral_videos_skips_report(monkeypatch):
    use_trending(monkeypatch, [make_video("quiet", 2, 10, "Tech India")])
    sent = capture_reports(monkeypatch)

    result = pipeline.run_radar(SETTINGS, now=NOW)

    assert result.videos == []
    assert sent == []
    assert result.report_sent is False
    assert result.delivery_error is None


def test_delivery_failure_still_returns_results(monkeypatch):
    use_trending(monkeypatch, [make_video("fresh", 1, 50000, "Tech India")])

    def failing_send(*args, **kwargs):
        raise telegram.NotificationError("Telegram rejected the report: Forbidden")

    monkeypatch.setattr(telegram, "send_report", failing_send)

    result = pipeline.run_radar(SETTINGS, now=NOW)

    assert [v.id for v in result.videos] == ["fresh"]
    assert result.report_sent is False
    assert "Forbidden" in result.delivery_error


def test_send_disabled_or_unconfigured(monkeypatch):
    use_trending(monkeypatch, [make_video("fresh", 1, 50000, "Tech India")])
    sent = capture_reports(monkeypatch)

    pipeline.run_radar(SETTINGS, now=NOW, send=False)
    unconfigured = RadarSettings(youtube_api_key="key-a", youtube_api_key_2="key-a")
    result = pipeline.run_radar(unconfigured, now=NOW)

    assert sent == []
    assert [v.id for v in result.videos] == ["fresh"]


def test_trending_failure_propagates(monkeypatch):
    def fail(url, params, timeout=15):
        raise youtube_client.YouTubeAPIError("YouTube request failed: ConnectionError")

    monkeypatch.setattr(youtube_client, "youtube_api_get", fail)
    with pytest.raises(AggregationError):
        pipeline.run_radar(SETTINGS, now=NOW)


def test_presentation_items_hide_internal_fields(monkeypatch):
    use_trending(monkeypatch, [make_video("clip", 1, 50000, "Tech India", duration="PT30S")])
    capture_reports(monkeypatch)

    result = pipeline.run_radar(SETTINGS, now=NOW)
    items = pipeline.presentation_items(result.videos)

    assert items == [{
        "title": "Tech India",
        "channelTitle": "Channel",
        "viewCount": 50000,
        "viewsPerHour": 50000,
        "hoursSincePublished": 1.0,
        "url": "https://www.youtube.com/shorts/clip",
    }]
