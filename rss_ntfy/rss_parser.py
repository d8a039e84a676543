"""
RSS/Atom feed normalization.

Parses raw feed documents with feedparser and maps their items onto
``FeedItem`` objects, whatever the source format.
"""

import enum
import io
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any

import feedparser
from feedparser.exceptions import ThingsNobodyCaresAboutButMe

from rss_ntfy.dates import parse_date
from rss_ntfy.exceptions import DateParseError, UnrecognizedFeedFormat
from rss_ntfy.models import FeedItem

logger = logging.getLogger(__name__)


class FeedFormat(enum.Enum):
    """Syndication formats understood by the parser, in detection order."""

    RSS = "rss"
    ATOM = "atom"


@dataclass
class ParsedFeed:
    """
    Result of parsing a feed document.

    Attributes
    ----------
    format : FeedFormat
        The format the document matched.
    items : list[FeedItem]
        Items in document order.
    skipped : int
        Number of items dropped because their date could not be parsed.
    """

    format: FeedFormat
    items: list[FeedItem] = field(default_factory=list)
    skipped: int = 0


def _detect_format(parsed: Any) -> FeedFormat:
    """
    Match a feedparser result against the known formats.

    Raises
    ------
    UnrecognizedFeedFormat
        If the document is not well-formed or has neither an RSS nor an
        Atom root.
    """
    exc = parsed.get("bozo_exception")
    if parsed.get("bozo") and not isinstance(exc, ThingsNobodyCaresAboutButMe):
        raise UnrecognizedFeedFormat(f"Document is not a well-formed feed: {exc}")

    version = parsed.get("version") or ""
    for feed_format in FeedFormat:
        if version.startswith(feed_format.value):
            return feed_format

    raise UnrecognizedFeedFormat("Document is neither RSS nor Atom")


def _split_tag(tag: Any) -> tuple[str, str]:
    """Split an ElementTree tag into (namespace, local name)."""
    if not isinstance(tag, str):
        return "", ""
    namespace, _, local = tag.rpartition("}")
    return namespace, local


def _raw_titles(content: bytes, feed_format: FeedFormat) -> list[str] | None:
    """
    Read item titles verbatim from the document.

    feedparser strips surrounding whitespace from titles, so the text is
    taken from each item's own ``title`` child instead. Returns None if
    the document cannot be read this way.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError:
        return None

    item_tag = "item" if feed_format is FeedFormat.RSS else "entry"
    titles = []
    for element in root.iter():
        namespace, local = _split_tag(element.tag)
        if local != item_tag:
            continue
        title = next(
            (child for child in element if _split_tag(child.tag) == (namespace, "title")),
            None,
        )
        titles.append("" if title is None else "".join(title.itertext()))
    return titles


def _entry_link(entry: Any) -> str:
    """Return the entry's link, falling back to the first link href."""
    if entry.get("link"):
        return entry["link"]
    # feedparser only maps alternate links onto ``link``
    for link in entry.get("links", []):
        if link.get("href"):
            return link["href"]
    return ""


def _to_item(entry: Any, title: str) -> FeedItem:
    """Build a FeedItem from a feedparser entry, raising DateParseError."""
    published = parse_date(entry.get("published", ""))
    return FeedItem(
        title=title,
        link=_entry_link(entry),
        published=published,
    )


def parse_feed(content: bytes, feed_name: str = "") -> ParsedFeed:
    """
    Parse a raw feed document into normalized items.

    RSS is tried first, then Atom. Items whose publication date cannot
    be parsed are logged and skipped; the rest of the feed is kept.

    Parameters
    ----------
    content : bytes
        Raw feed document.
    feed_name : str
        Name of the feed, for logging.

    Returns
    -------
    ParsedFeed
        The detected format and the parsed items.

    Raises
    ------
    UnrecognizedFeedFormat
        If the document matches neither format.
    """
    # Some servers send leading newlines, which breaks the XML declaration
    content = content.lstrip()
    parsed: Any = feedparser.parse(io.BytesIO(content))
    feed_format = _detect_format(parsed)

    titles = _raw_titles(content, feed_format)
    if titles is None or len(titles) != len(parsed.entries):
        titles = [entry.get("title", "") for entry in parsed.entries]

    result = ParsedFeed(format=feed_format)
    for entry, title in zip(parsed.entries, titles):
        try:
            result.items.append(_to_item(entry, title))
        except DateParseError as e:
            result.skipped += 1
            logger.error(
                "Skipping item '%s' in feed '%s': %s",
                title,
                feed_name,
                e,
            )

    logger.debug(
        "Parsed %d item(s) from %s feed '%s'",
        len(result.items),
        feed_format.value,
        feed_name,
    )
    return result
