"""
Timestamp parsing for feed items.

Feeds in the wild use a handful of RFC 822, RFC 1123 and RFC 3339
variants. Each known layout is tried in a fixed order and the first
match wins.
"""

import re
from datetime import datetime, timedelta, timezone

from rss_ntfy.exceptions import DateParseError

# RFC 822 zone names; any other alphabetic zone is read as UTC.
ZONE_OFFSETS = {
    "UT": 0,
    "UTC": 0,
    "GMT": 0,
    "Z": 0,
    "EST": -5,
    "EDT": -4,
    "CST": -6,
    "CDT": -5,
    "MST": -7,
    "MDT": -6,
    "PST": -8,
    "PDT": -7,
}

# (strptime format, trailing zone name) in priority order. %d also
# accepts single-digit days, so "Mon, 2 Jan 2006 ..." needs no entry of its own.
DATE_FORMATS: list[tuple[str, bool]] = [
    ("%a, %d %b %Y %H:%M:%S %z", False),  # RFC 1123, numeric zone
    ("%a, %d %b %Y %H:%M:%S", True),  # RFC 1123, zone name
    ("%d %b %y %H:%M", True),  # RFC 822, zone name
    ("%d %b %y %H:%M %z", False),  # RFC 822, numeric zone
    ("%Y-%m-%dT%H:%M:%S%z", False),  # RFC 3339
    ("%Y-%m-%d %H:%M:%S", False),  # naive, UTC
    ("%Y-%m-%dT%H:%M:%S.%f%z", False),  # RFC 3339, fractional seconds
]

# %f stops at microseconds; RFC 3339 allows up to nanoseconds.
_EXTRA_FRACTION = re.compile(r"(\.\d{6})\d+")


def _zone(name: str) -> timezone | None:
    """Return the timezone for an RFC 822 zone name, or None if not a name."""
    if not name.isalpha():
        return None
    hours = ZONE_OFFSETS.get(name.upper(), 0)
    return timezone(timedelta(hours=hours))


def _try_format(value: str, fmt: str, zone_name: bool) -> datetime | None:
    if zone_name:
        head, _, tail = value.rpartition(" ")
        if not head:
            return None
        tz = _zone(tail)
        if tz is None:
            return None
        try:
            return datetime.strptime(head, fmt).replace(tzinfo=tz)
        except ValueError:
            return None

    try:
        parsed = datetime.strptime(value, fmt)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date(value: str) -> datetime:
    """
    Parse a feed timestamp into a timezone-aware datetime.

    Parameters
    ----------
    value : str
        Timestamp string from a ``pubDate`` or ``published`` element.

    Returns
    -------
    datetime
        The parsed time, with its offset resolved.

    Raises
    ------
    DateParseError
        If the string matches none of the known formats.
    """
    if not value:
        raise DateParseError(value)

    text = _EXTRA_FRACTION.sub(r"\1", value.strip())
    for fmt, zone_name in DATE_FORMATS:
        parsed = _try_format(text, fmt, zone_name)
        if parsed is not None:
            return parsed

    raise DateParseError(value)
