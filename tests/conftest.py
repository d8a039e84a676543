"""
Shared fixtures for RSS ntfy tests.

Provides common test fixtures for use across all test modules.
"""

from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from rss_ntfy.models import FeedItem, FeedState


# Path to test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"


def make_rss(*items: tuple[str, str, str]) -> str:
    """Build an RSS 2.0 document from (title, link, pubDate) tuples."""
    body = "".join(
        f"<item><title>{title}</title><link>{link}</link><pubDate>{date}</pubDate></item>"
        for title, link, date in items
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<rss version="2.0"><channel><title>Feed</title>{body}</channel></rss>'
    )


def make_atom(*entries: tuple[str, str, str]) -> str:
    """Build an Atom document from (title, link, published) tuples."""
    body = "".join(
        f'<entry><title>{title}</title><link href="{link}"/>'
        f"<id>{link}</id><published>{date}</published></entry>"
        for title, link, date in entries
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<feed xmlns="http://www.w3.org/2005/Atom"><title>Feed</title>'
        f"{body}</feed>"
    )


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def sample_rss_path(fixtures_dir: Path) -> Path:
    """Return path to sample RSS feed file."""
    return fixtures_dir / "sample_rss.xml"


@pytest.fixture
def sample_atom_path(fixtures_dir: Path) -> Path:
    """Return path to sample Atom feed file."""
    return fixtures_dir / "sample_atom.xml"


@pytest.fixture
def sample_config_path(fixtures_dir: Path) -> Path:
    """Return path to sample config file."""
    return fixtures_dir / "sample_config.yaml"


@pytest.fixture
def sample_rss_content(sample_rss_path: Path) -> bytes:
    """Return contents of sample RSS feed."""
    return sample_rss_path.read_bytes()


@pytest.fixture
def sample_atom_content(sample_atom_path: Path) -> bytes:
    """Return contents of sample Atom feed."""
    return sample_atom_path.read_bytes()


@pytest.fixture
def start_time() -> datetime:
    """Watermark used by feed state fixtures."""
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def feed_state(start_time: datetime) -> FeedState:
    """
    Create a feed state with a known watermark.

    Returns
    -------
    FeedState
        State for https://example.com/feed.xml at 2024-01-01T00:00:00Z.
    """
    return FeedState(
        url="https://example.com/feed.xml",
        ntfy_topic="https://ntfy.sh/test-topic",
        watermark=start_time,
        name="Test Feed",
    )


@pytest.fixture
def sample_item() -> FeedItem:
    """Create a sample feed item."""
    return FeedItem(
        title="Test Entry Title",
        link="https://example.com/test-entry",
        published=datetime(2024, 1, 2, tzinfo=timezone.utc),
    )


@pytest.fixture
def mock_fetcher() -> MagicMock:
    """
    Create a mock feed fetcher.

    Returns
    -------
    MagicMock
        A fetcher whose ``fetch`` returns an empty RSS document.
    """
    fetcher = MagicMock()
    fetcher.fetch = AsyncMock(return_value=make_rss().encode())
    fetcher.close = AsyncMock()
    return fetcher


@pytest.fixture
def mock_notifier() -> MagicMock:
    """
    Create a mock notifier.

    Returns
    -------
    MagicMock
        A notifier whose ``send_item`` always succeeds.
    """
    notifier = MagicMock()
    notifier.send_item = AsyncMock(return_value=True)
    notifier.close = AsyncMock()
    return notifier
