from typing import Iterable

from .records import VideoRecord

LOCALE_INDICATORS = [
    "india",
    "indian",
    "bharat",
    "hindustan",
    "delhi",
    "mumbai",
    "bangalore",
    "hyderabad",
    "chennai",
    "hindi",
    "tamil",
    "telugu",
    "bengali",
    "marathi",
    "rupees",
    "rs.",
    "rs ",
    "₹",
]

TOPIC_INDICATORS = [
    "tech",
    "technology",
    "gadget",
    "smartphone",
    "laptop",
    "review",
    "unboxing",
    "comparison",
    "vs",
    "launch",
    "mobile",
    "computer",
    "software",
    "hardware",
    "digital",
    "android",
    "ios",
    "windows",
    "apple",
    "samsung",
    "xiaomi",
]


def score_indicators(indicators: Iterable[str], fields: Iterable[str]) -> int:
    """Number of indicators found (case-insensitive substring) in at least one field."""
    lowered = [(f or "").lower() for f in fields]
    return sum(1 for term in indicators if any(term in text for text in lowered))


def classify(record: VideoRecord) -> VideoRecord:
    fields = (record.title, record.description, record.channel_title)
    record.locale_score = score_indicators(LOCALE_INDICATORS, fields)
    record.topic_score = score_indicators(TOPIC_INDICATORS, fields)
    return record


def passes_gate(record: VideoRecord) -> bool:
    return record.locale_score >= 1 and record.topic_score >= 1


def classify_videos(records: Iterable[VideoRecord]) -> list[VideoRecord]:
    return [record for record in records if passes_gate(classify(record))]
