from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from backend.app.services.aggregator import AggregationError
from backend.app.services.pipeline import RadarResult, presentation_items, run_radar
from backend.app.services.settings import ConfigError, configure_logging, load_settings


def truncate(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 1] + "…"


def print_table(result: RadarResult) -> None:
    if not result.videos:
        print("No videos matched the criteria in this run.")
        return
    print(f"{'#':>3}  {'Views/Hour':>10}  {'Views':>11}  {'Hours':>5}  Title / Channel")
    for idx, video in enumerate(result.videos, start=1):
        print(
            f"{idx:>3}  {video.views_per_hour:>10,}  {video.view_count:>11,}  "
            f"{video.hours_since_published:>5.1f}  {truncate(video.title, 60)} / {video.channel_title}"
        )
        print(f"{'':>3}  {video.url}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Find viral Indian tech videos and report them to Telegram.")
    parser.add_argument("--no-notify", action="store_true", help="skip the Telegram report")
    parser.add_argument("--json", action="store_true", help="print presentation records as JSON")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args()

    configure_logging(args.log_level)
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    try:
        result = run_radar(settings, send=not args.no_notify)
    except AggregationError as exc:
        print(f"Discovery run failed: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(presentation_items(result.videos), indent=2, ensure_ascii=False))
    else:
        print_table(result)
    if result.delivery_error:
        print(f"Telegram report not delivered: {result.delivery_error}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
