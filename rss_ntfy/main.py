"""
Main entry point for RSS ntfy.

Runs the async loop that polls feeds and sends notifications.
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from urllib.parse import urlparse

import coloredlogs

from rss_ntfy.config import load_config, parse_duration
from rss_ntfy.fetcher import FeedFetcher
from rss_ntfy.models import FeedState
from rss_ntfy.ntfy import NtfyNotifier
from rss_ntfy.poller import FeedPoller

logger = logging.getLogger(__name__)


def redact_proxy_url(proxy_url: str) -> str:
    """
    Redact credentials from a proxy URL for safe logging.

    Parameters
    ----------
    proxy_url : str
        The proxy URL potentially containing credentials.

    Returns
    -------
    str
        The proxy URL with password redacted.
    """
    try:
        parsed = urlparse(proxy_url)
        if parsed.password:
            netloc = parsed.hostname or ""
            if parsed.port:
                netloc = f"{netloc}:{parsed.port}"
            if parsed.username:
                netloc = f"{parsed.username}:****@{netloc}"
            return f"{parsed.scheme}://{netloc}{parsed.path}"
        return proxy_url
    except ValueError:
        return "<proxy url>"


class FeedWatcher:
    """
    Main application.

    Owns the HTTP clients and feed states, and repeats a poll over all
    feeds every check interval.
    """

    def __init__(self, config_path: str | Path, interval: float | None = None):
        """
        Initialize the watcher.

        Parameters
        ----------
        config_path : str | Path
            Path to the YAML configuration file.
        interval : float | None
            Seconds between polls, overriding the configured interval.
        """
        self.config = load_config(config_path)
        self.interval = interval or self.config.defaults.check_interval
        self.feeds: list[FeedState] = self.config.feed_states()
        self.fetcher: FeedFetcher | None = None
        self.notifier: NtfyNotifier | None = None
        self.poller: FeedPoller | None = None
        self._running = False
        self._task: asyncio.Task | None = None

    async def start(self) -> None:
        """Start polling until stopped."""
        logger.info("Starting RSS ntfy")

        defaults = self.config.defaults
        if defaults.proxy:
            logger.info("Using proxy: %s", redact_proxy_url(defaults.proxy))

        self.fetcher = FeedFetcher(
            timeout=defaults.request_timeout,
            user_agent=defaults.user_agent,
            proxy_url=defaults.proxy,
        )
        self.notifier = NtfyNotifier(
            timeout=defaults.request_timeout,
            proxy_url=defaults.proxy,
        )
        self.poller = FeedPoller(
            self.fetcher,
            self.notifier,
            max_concurrency=defaults.max_concurrency,
        )

        self._running = True
        logger.info(
            "Watching %d feed(s), check interval: %ss",
            len(self.feeds),
            self.interval,
        )

        self._task = asyncio.create_task(self._run())
        try:
            await self._task
        except asyncio.CancelledError:
            logger.info("Watcher task cancelled")

    async def _run(self) -> None:
        """Poll all feeds, then sleep, until stopped."""
        while self._running:
            await self.run_once()
            if not self._running:
                break
            logger.info("Sleeping for %ss", self.interval)
            await asyncio.sleep(self.interval)

    async def run_once(self) -> None:
        """Run a single poll over every feed."""
        if not self.poller:
            raise RuntimeError("Components not initialized")
        await self.poller.poll(self.feeds)

    async def stop(self) -> None:
        """Stop the watcher gracefully."""
        logger.info("Stopping RSS ntfy")
        self._running = False

        if self._task and not self._task.done():
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)

        if self.fetcher:
            await self.fetcher.close()
        if self.notifier:
            await self.notifier.close()

        logger.info("RSS ntfy stopped")


def setup_logging(verbose: bool = False) -> None:
    """
    Configure application logging.

    Parameters
    ----------
    verbose : bool
        If True, set log level to DEBUG.
    """
    level = logging.DEBUG if verbose else logging.INFO

    coloredlogs.install(
        level=level,
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Poll RSS/Atom feeds and push new items to ntfy",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "-c",
        "--config",
        default="config.yaml",
        help="Path to configuration file",
    )
    parser.add_argument(
        "-i",
        "--interval",
        default=None,
        help="Check interval (e.g., 30s, 20m, 2h); overrides the config file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    setup_logging(args.verbose)

    interval = None
    if args.interval:
        try:
            interval = parse_duration(args.interval)
        except ValueError as e:
            logger.error("Invalid interval format: %s", e)
            sys.exit(1)

    config_path = Path(args.config).expanduser()
    if not config_path.exists():
        logger.error("Configuration file not found: %s", config_path)
        sys.exit(1)

    try:
        watcher = FeedWatcher(config_path, interval=interval)
    except Exception as e:
        logger.error("Error loading config: %s", e)
        sys.exit(1)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    def signal_handler():
        logger.info("Received shutdown signal")
        asyncio.ensure_future(watcher.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    try:
        loop.run_until_complete(watcher.start())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        loop.run_until_complete(watcher.stop())
        loop.close()


if __name__ == "__main__":
    main()
