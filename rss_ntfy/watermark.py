"""
New-item detection based on a per-feed watermark.
"""

import logging
from collections.abc import Iterable, Iterator

from rss_ntfy.models import FeedItem, FeedState

logger = logging.getLogger(__name__)


def is_new(feed: FeedState, item: FeedItem) -> bool:
    """Return True if the item was published strictly after the watermark."""
    return item.published > feed.watermark


def select_new_items(feed: FeedState, items: Iterable[FeedItem]) -> Iterator[FeedItem]:
    """
    Yield the items published after the feed's watermark.

    Items are walked in the order given and the watermark is advanced in
    place before each new item is yielded, so later items are compared
    against the advanced value. With a newest-first feed this means only
    the newest of several fresh items is reported within one check.

    Parameters
    ----------
    feed : FeedState
        The feed whose watermark is read and advanced.
    items : Iterable[FeedItem]
        Items in source document order.

    Yields
    ------
    FeedItem
        Each item that moved the watermark forward.
    """
    for item in items:
        if not is_new(feed, item):
            continue
        feed.watermark = item.published
        logger.info(
            "Updated last published timestamp for '%s': %s",
            feed.label,
            feed.watermark.isoformat(),
        )
        yield item
