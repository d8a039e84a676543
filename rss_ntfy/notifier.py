"""
Protocol definition for notification backends.

Defines the common interface that all notifiers must implement.
"""

from typing import Protocol, runtime_checkable

from rss_ntfy.models import FeedItem


@runtime_checkable
class Notifier(Protocol):
    """
    Protocol defining the interface for notification backends.

    The poller only depends on this interface, so tests and alternative
    backends can stand in for the ntfy client.
    """

    async def send_item(self, endpoint: str, item: FeedItem) -> bool:
        """
        Send a feed item as a notification.

        Delivery is attempted once. Failures are logged by the
        implementation rather than raised.

        Parameters
        ----------
        endpoint : str
            Destination of the notification.
        item : FeedItem
            The new item to announce.

        Returns
        -------
        bool
            True if the notification was accepted.
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the notifier."""
        ...
