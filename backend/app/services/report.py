import html
from dataclasses import dataclass, field
from typing import Sequence

from .records import VideoRecord
from .settings import RadarSettings
from .virality import RECENT_VIEWS_PER_HOUR

MESSAGE_LIMIT = 4096
DIVIDER = "〰️" * 10


def message_length(text: str) -> int:
    """Length in UTF-16 code units, the unit Telegram counts message size in."""
    return len(text.encode("utf-16-le")) // 2


def escape(text: str) -> str:
    return html.escape(text, quote=False)


@dataclass
class ReportBlock:
    header: str
    entries: list[str] = field(default_factory=list)
    omitted: int = 0

    @property
    def text(self) -> str:
        return self.header + "".join(self.entries)

    @property
    def length(self) -> int:
        return message_length(self.text)


def render_header(settings: RadarSettings, total: int) -> str:
    return (
        "🎯 <b>YouTube Trending Videos Report</b> 🎯\n\n"
        "<b>Search Criteria:</b>\n"
        f"🌍 Region: <code>{escape(settings.region_code)}</code>\n"
        f"📺 Category ID: <code>{escape(settings.category_id)}</code>\n"
        f"⏰ Time Window: <code>{settings.window_hours}</code> hours\n"
        f"📈 Minimum Views/Hour: <code>{RECENT_VIEWS_PER_HOUR:,}</code>\n\n"
        "🔥 <b>Results:</b>\n"
        f"Found <b>{total}</b> viral video(s) matching criteria\n\n"
        f"{DIVIDER}\n\n"
    )


def render_entry(position: int, video: VideoRecord) -> str:
    return (
        f"<b>#{position}</b>\n"
        f"🎬 <b>Title:</b> {escape(video.title)}\n"
        f"📺 <b>Channel:</b> {escape(video.channel_title)}\n"
        f"🚀 <b>Views/Hour:</b> {video.views_per_hour:,}\n"
        f"👀 <b>Total Views:</b> {video.view_count:,}\n"
        f"⏰ <b>Hours Since Upload:</b> {video.hours_since_published:.1f}\n"
        f"🔗 <b>Link:</b> {video.url}\n\n"
    )


def pack_entries(header: str, entries: Sequence[str], limit: int = MESSAGE_LIMIT) -> ReportBlock:
    """
    Greedy, order-preserving packing: stop at the first entry that would push
    the message over the limit and drop it along with everything after it.
    """
    used = message_length(header)
    if used > limit:
        raise ValueError(f"Report header is {used} units long, over the {limit} limit")
    block = ReportBlock(header=header)
    for idx, entry in enumerate(entries):
        size = message_length(entry)
        if used + size > limit:
            block.omitted = len(entries) - idx
            break
        block.entries.append(entry)
        used += size
    return block


def pack_report(videos: Sequence[VideoRecord], settings: RadarSettings, limit: int = MESSAGE_LIMIT) -> ReportBlock:
    header = render_header(settings, len(videos))
    entries = [render_entry(idx, video) for idx, video in enumerate(videos, start=1)]
    return pack_entries(header, entries, limit=limit)
