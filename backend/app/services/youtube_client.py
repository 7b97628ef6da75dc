from datetime import datetime, timezone
from typing import Any

import requests

YOUTUBE_VIDEOS_LIST = "https://www.googleapis.com/youtube/v3/videos"
YOUTUBE_SEARCH_LIST = "https://www.googleapis.com/youtube/v3/search"
VIDEO_PARTS = "snippet,statistics,contentDetails"
DEFAULT_TIMEOUT = 15


class YouTubeAPIError(Exception):
    pass


class YouTubeQuotaExceededError(YouTubeAPIError):
    pass


def youtube_api_get(url: str, params: dict[str, Any], timeout: int = DEFAULT_TIMEOUT) -> dict[str, Any]:
    try:
        response = requests.get(url, params=params, timeout=timeout)
    except requests.RequestException as exc:
        raise YouTubeAPIError(f"YouTube request failed: {exc.__class__.__name__}") from exc

    if response.status_code == 200:
        try:
            payload = response.json()
        except ValueError as exc:
            raise YouTubeAPIError("YouTube API returned a non-JSON body") from exc
        if not isinstance(payload, dict):
            raise YouTubeAPIError("YouTube API returned an unexpected body")
        return payload

    # The Data API reports exhausted quota as 403; that is the only rotation signal.
    if response.status_code == 403:
        raise YouTubeQuotaExceededError("YouTube API quota exceeded")

    raise YouTubeAPIError(f"YouTube API returned HTTP {response.status_code}")


def isoformat_z(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def list_trending(
    api_key: str,
    region: str,
    category_id: str,
    max_results: int = 50,
    timeout: int = DEFAULT_TIMEOUT,
) -> list[dict]:
    payload = youtube_api_get(
        YOUTUBE_VIDEOS_LIST,
        {
            "part": VIDEO_PARTS,
            "chart": "mostPopular",
            "regionCode": region,
            "videoCategoryId": category_id,
            "maxResults": max_results,
            "key": api_key,
        },
        timeout=timeout,
    )
    return payload.get("items") or []


def list_by_ids(api_key: str, video_ids: list[str], timeout: int = DEFAULT_TIMEOUT) -> list[dict]:
    if not video_ids:
        return []
    payload = youtube_api_get(
        YOUTUBE_VIDEOS_LIST,
        {
            "part": VIDEO_PARTS,
            "id": ",".join(video_ids),
            "key": api_key,
        },
        timeout=timeout,
    )
    return payload.get("items") or []


def search_video_ids(
    api_key: str,
    query: str,
    region: str,
    published_after: datetime,
    max_results: int = 10,
    timeout: int = DEFAULT_TIMEOUT,
) -> list[str]:
    payload = youtube_api_get(
        YOUTUBE_SEARCH_LIST,
        {
            "part": "id",
            "q": query,
            "type": "video",
            "regionCode": region,
            "maxResults": max_results,
            "order": "viewCount",
            "publishedAfter": isoformat_z(published_after),
            "key": api_key,
        },
        timeout=timeout,
    )
    ids = []
    for it in payload.get("items") or []:
        ref = it.get("id") if isinstance(it, dict) else None
        vid = ref.get("videoId") if isinstance(ref, dict) else None
        if vid:
            ids.append(vid)
    return ids
