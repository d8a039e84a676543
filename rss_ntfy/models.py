"""
Data models shared by the polling pipeline.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class FeedItem:
    """
    Normalized RSS item or Atom entry.

    Attributes
    ----------
    title : str
        Item title, as found in the document.
    link : str
        Item URL.
    published : datetime
        Timezone-aware publication time.
    """

    title: str
    link: str
    published: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class FeedState:
    """
    A watched feed and its notification watermark.

    Attributes
    ----------
    url : str
        URL of the RSS/Atom feed.
    ntfy_topic : str
        Endpoint receiving a POST for each new item.
    watermark : datetime
        Publication time of the most recently notified item. Starts at the
        time the state was created, so items already published are ignored.
    name : str | None
        Optional label used in log messages.
    """

    url: str
    ntfy_topic: str
    watermark: datetime = field(default_factory=_utcnow)
    name: str | None = None

    @property
    def label(self) -> str:
        """Name to use when logging about this feed."""
        return self.name or self.url
