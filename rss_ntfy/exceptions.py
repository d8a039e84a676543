"""
Error types raised while polling feeds.

None of these are fatal: each one abandons a single item, notification
or feed for the current tick.
"""


class FeedWatchError(Exception):
    """Base class for feed polling errors."""


class FetchError(FeedWatchError):
    """Raised when a feed cannot be downloaded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Error fetching {url}: {reason}")


class UnrecognizedFeedFormat(FeedWatchError):
    """Raised when a document is neither a well-formed RSS nor Atom feed."""


class DateParseError(FeedWatchError, ValueError):
    """Raised when a timestamp matches none of the known formats."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Unable to parse date: {value!r}")


class NotifyError(FeedWatchError):
    """Raised when a notification endpoint rejects or fails a delivery."""

    def __init__(self, endpoint: str, reason: str, status: int | None = None):
        self.endpoint = endpoint
        self.reason = reason
        self.status = status
        super().__init__(f"Failed to send notification to {endpoint}: {reason}")
