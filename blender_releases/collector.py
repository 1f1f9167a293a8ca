"""High-level orchestration: scrape every channel and merge the results."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from .config import STABLE_CHANNEL, ScrapeConfig
from .models import ChannelMap, ReleaseCollection
from .scraper import ScrapeError, scrape_archive, scrape_stable

logger = logging.getLogger("blender_releases")


@dataclass
class ChannelResult:
    """Outcome of scraping a single channel."""

    channel: str
    records: Optional[ReleaseCollection]
    elapsed_seconds: float
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.records is not None


def _scrape_channel(channel: str, config: ScrapeConfig) -> ReleaseCollection:
    if channel == STABLE_CHANNEL:
        return scrape_stable(config)
    return scrape_archive(channel, config)


async def _run_channel(
    channel: str,
    config: ScrapeConfig,
    semaphore: asyncio.Semaphore,
    scrape: Callable[[str, ScrapeConfig], ReleaseCollection],
) -> ChannelResult:
    async with semaphore:
        start = time.perf_counter()
        try:
            records = await asyncio.to_thread(scrape, channel, config)
        except ScrapeError as exc:
            logger.error("Channel %s failed: %s", channel, exc)
            return ChannelResult(channel, None, time.perf_counter() - start, str(exc))
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Unexpected error scraping channel %s", channel)
            return ChannelResult(channel, None, time.perf_counter() - start, repr(exc))
        elapsed = time.perf_counter() - start
        logger.info("Channel %s: %d release(s) in %.2fs", channel, len(records), elapsed)
        return ChannelResult(channel, records, elapsed)


async def run_collector(
    config: ScrapeConfig,
    scrape: Callable[[str, ScrapeConfig], ReleaseCollection] = _scrape_channel,
) -> List[ChannelResult]:
    """Scrape the stable page and every configured archive channel concurrently."""
    channels = [STABLE_CHANNEL, *config.channels]
    semaphore = asyncio.Semaphore(max(1, config.max_workers))
    tasks = [_run_channel(channel, config, semaphore, scrape) for channel in channels]
    return list(await asyncio.gather(*tasks))


def build_channel_map(results: List[ChannelResult]) -> ChannelMap:
    """Merge successful channels in scrape order; failed channels are omitted."""
    return {result.channel: result.records for result in results if result.records is not None}


def collect_releases(config: ScrapeConfig) -> List[ChannelResult]:
    return asyncio.run(run_collector(config))
