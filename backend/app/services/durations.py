import re

ISO8601_DURATION_RE = re.compile(
    r"P(?:(\d+)W)?(?:(\d+)D)?"
    r"(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?"
)


def parse_duration(duration) -> float:
    """Seconds in an ISO 8601 duration such as PT1M5S; 0 for anything unparsable."""
    if not isinstance(duration, str):
        return 0
    value = duration.strip().upper()
    match = ISO8601_DURATION_RE.fullmatch(value)
    # "P", "PT" and "P1DT" match the pattern but are not valid durations.
    if not match or value in {"P", "PT"} or value.endswith("T"):
        return 0
    weeks, days, hours, minutes, seconds = match.groups()
    total = (
        int(weeks or 0) * 7 * 86400
        + int(days or 0) * 86400
        + int(hours or 0) * 3600
        + int(minutes or 0) * 60
        + float(seconds or 0)
    )
    return int(total) if total.is_integer() else total
