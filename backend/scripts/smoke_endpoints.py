from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

from fastapi import HTTPException

ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import backend.main as main_module
from backend.app.services import telegram, youtube_client
from backend.app.services.aggregator import AggregationError

SMOKE_ENV = {
    "YOUTUBE_API_KEY": "smoke-key-a",
    "YOUTUBE_API_KEY_2": "smoke-key-b",
    "TELEGRAM_BOT_TOKEN": "smoke-token",
    "TELEGRAM_CHAT_ID": "smoke-chat",
}


def make_video(video_id: str, hours_ago: float, views: int, duration: str, title: str) -> dict:
    published_at = (datetime.now(timezone.utc) - timedelta(hours=hours_ago)).isoformat().replace("+00:00", "Z")
    return {
        "id": video_id,
        "snippet": {
            "title": title,
            "channelTitle": "Smoke Tech India",
            "description": "",
            "publishedAt": published_at,
        },
        "statistics": {"viewCount": str(views)},
        "contentDetails": {"duration": duration},
    }


def assert_true(condition: bool, message: str) -> None:
    if not condition:
        raise AssertionError(message)


def fake_youtube_api_get(url: str, params: dict, timeout: int = 15) -> dict:
    _ = timeout
    if url == youtube_client.YOUTUBE_SEARCH_LIST:
        return {"items": [{"id": {"videoId": "kw1"}}]}
    if params.get("chart") == "mostPopular":
        return {"items": [make_video("trend1", 2, 50000, "PT45S", "Smartphone launch in India")]}
    return {"items": [make_video("kw1", 30, 90000, "PT8M", "Laptop review hindi")]}


def test_health() -> None:
    payload = main_module.health()
    assert_true(payload.get("ok") is True, "/health should return ok=true")


def test_run_with_report() -> None:
    sent = []
    with (
        patch.dict(os.environ, SMOKE_ENV),
        patch.object(youtube_client, "youtube_api_get", side_effect=fake_youtube_api_get),
        patch.object(telegram, "send_report", side_effect=lambda *args, **kwargs: sent.append(args)),
    ):
        payload = main_module.run_viral_radar(notify=True)

    ids = [item["url"].rsplit("/", 1)[-1] for item in payload["items"]]
    assert_true(payload["meta"]["count"] == 2, "/radar/run should return both viral videos")
    assert_true(ids[0] == "trend1", "/radar/run should rank by views per hour")
    assert_true(payload["meta"]["report_sent"] is True, "/radar/run should report delivery")
    assert_true(len(sent) == 1, "/radar/run should send exactly one Telegram message")


def test_run_conflict() -> None:
    with patch.dict(os.environ, SMOKE_ENV):
        main_module.RUN_LOCK.acquire()
        try:
            main_module.run_viral_radar(notify=False)
        except HTTPException as exc:
            assert_true(exc.status_code == 409, "/radar/run should reject overlapping runs")
        else:
            raise AssertionError("/radar/run should reject overlapping runs")
        finally:
            main_module.RUN_LOCK.release()


def test_run_trending_failure() -> None:
    def failing_get(url: str, params: dict, timeout: int = 15) -> dict:
        raise youtube_client.YouTubeAPIError("YouTube API returned HTTP 500")

    with (
        patch.dict(os.environ, SMOKE_ENV),
        patch.object(youtube_client, "youtube_api_get", side_effect=failing_get),
    ):
        try:
            main_module.run_viral_radar(notify=False)
        except AggregationError:
            return
    raise AssertionError("/radar/run should fail when the trending chart is unavailable")


def run() -> int:
    checks = [
        ("health", test_health),
        ("run with report", test_run_with_report),
        ("overlapping run rejected", test_run_conflict),
        ("trending failure is fatal", test_run_trending_failure),
    ]
    failures = []

    for check_name, check_fn in checks:
        try:
            check_fn()
            print(f"[PASS] {check_name}")
        except Exception as exc:  # pragma: no cover - smoke script output path
            failures.append((check_name, str(exc)))
            print(f"[FAIL] {check_name}: {exc}")

    if failures:
        print(f"\nSmoke checks failed: {len(failures)}")
        for check_name, message in failures:
            print(f"- {check_name}: {message}")
        return 1

    print("\nAll smoke checks passed.")
    return 0


if __name__ == "__main__":
    sys.exit(run())
