"""
Poll coordination.

Runs one check over every configured feed concurrently and waits for
all of them before the check is considered complete.
"""

import asyncio
import dataclasses
import enum
import logging
from dataclasses import dataclass

from rss_ntfy.exceptions import FetchError, UnrecognizedFeedFormat
from rss_ntfy.fetcher import FeedFetcher
from rss_ntfy.models import FeedState
from rss_ntfy.notifier import Notifier
from rss_ntfy.rss_parser import parse_feed
from rss_ntfy.watermark import select_new_items

logger = logging.getLogger(__name__)


class PollState(enum.Enum):
    """Lifecycle of a single poll."""

    IDLE = "idle"
    DISPATCHING = "dispatching"
    AWAITING = "awaiting"


@dataclass
class FeedReport:
    """
    Outcome of checking one feed.

    Attributes
    ----------
    feed : FeedState
        The feed as it stood at the end of the check.
    new_items : int
        Number of items that advanced the watermark.
    notified : int
        Number of notifications accepted by the endpoint.
    error : Exception | None
        The error that stopped the check early, if any.
    """

    feed: FeedState
    new_items: int = 0
    notified: int = 0
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FeedPoller:
    """
    Fans out one check per feed and joins them.

    Every check works on its own copy of the feed state. Advanced
    watermarks are written back to the caller's objects only once all
    checks have finished.
    """

    def __init__(
        self,
        fetcher: FeedFetcher,
        notifier: Notifier,
        max_concurrency: int | None = None,
    ):
        """
        Initialize the poller.

        Parameters
        ----------
        fetcher : FeedFetcher
            Downloads feed documents.
        notifier : Notifier
            Delivers notifications for new items.
        max_concurrency : int | None
            Upper bound on feeds checked at once. None means no bound.
        """
        self.fetcher = fetcher
        self.notifier = notifier
        self.max_concurrency = max_concurrency
        self.state = PollState.IDLE

    async def poll(self, feeds: list[FeedState]) -> list[FeedReport]:
        """
        Check every feed once.

        Parameters
        ----------
        feeds : list[FeedState]
            Feeds to check. Their watermarks are updated when the poll ends.

        Returns
        -------
        list[FeedReport]
            One report per feed, in the same order as ``feeds``.
        """
        if self.state is not PollState.IDLE:
            raise RuntimeError("A poll is already in progress")

        self.state = PollState.DISPATCHING
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

        try:
            tasks = [
                asyncio.create_task(self._run_check(dataclasses.replace(feed), semaphore))
                for feed in feeds
            ]

            self.state = PollState.AWAITING
            results = await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            self.state = PollState.IDLE

        reports = []
        for feed, result in zip(feeds, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.error("Unexpected error checking feed '%s': %s", feed.label, result)
                reports.append(FeedReport(feed=dataclasses.replace(feed), error=result))
                continue
            feed.watermark = result.feed.watermark
            reports.append(result)

        logger.info(
            "Checked %d feed(s): %d notification(s) sent, %d failed",
            len(reports),
            sum(r.notified for r in reports),
            sum(1 for r in reports if not r.ok),
        )
        return reports

    async def _run_check(
        self, feed: FeedState, semaphore: asyncio.Semaphore | None
    ) -> FeedReport:
        if semaphore is None:
            return await self.check_feed(feed)
        async with semaphore:
            return await self.check_feed(feed)

    async def check_feed(self, feed: FeedState) -> FeedReport:
        """
        Fetch, parse, filter and notify for a single feed.

        Parameters
        ----------
        feed : FeedState
            The feed to check. Its watermark is advanced in place.

        Returns
        -------
        FeedReport
            What happened during the check.
        """
        report = FeedReport(feed=feed)
        logger.info("Checking feed '%s'", feed.label)

        try:
            content = await self.fetcher.fetch(feed.url)
        except FetchError as e:
            logger.error("Failed to fetch feed '%s': %s", feed.label, e.reason)
            report.error = e
            return report

        try:
            parsed = parse_feed(content, feed.label)
        except UnrecognizedFeedFormat as e:
            logger.error("Error parsing feed '%s': %s", feed.label, e)
            report.error = e
            return report

        logger.info("Processing '%s' as %s feed", feed.label, parsed.format.value.upper())

        for item in select_new_items(feed, parsed.items):
            report.new_items += 1
            if await self.notifier.send_item(feed.ntfy_topic, item):
                report.notified += 1

        if report.new_items:
            logger.info(
                "Found %d new item%s in '%s'",
                report.new_items,
                "" if report.new_items == 1 else "s",
                feed.label,
            )
        else:
            logger.debug("No new items in feed '%s'", feed.label)

        return report
