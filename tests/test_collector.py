"""Tests for concurrent channel collection and failure isolation."""

import asyncio
import datetime as dt
from unittest.mock import patch

from blender_releases.collector import (
    ChannelResult,
    build_channel_map,
    collect_releases,
    run_collector,
)
from blender_releases.config import ScrapeConfig
from blender_releases.models import ReleaseRecord, SingleDownload
from blender_releases.scraper import ScrapeError


def _record(tag):
    return ReleaseRecord(
        version=(4, 3, 0),
        version_detail="main",
        download=SingleDownload(download_link=f"https://example.org/{tag}.zip"),
        download_type="zip",
        download_size="300 MB",
        release_date=dt.datetime(2024, 7, 16),
        tag=tag,
        os="linux",
        arch="x86_64",
    )


def _fake_scrape(failures=()):
    def scrape(channel, config):
        if channel in failures:
            raise ScrapeError(f"{channel} unavailable")
        return [_record(channel)]

    return scrape


def test_all_channels_in_order(config):
    results = asyncio.run(run_collector(config, scrape=_fake_scrape()))

    assert [result.channel for result in results] == ["stable", "daily", "experimental", "patch"]
    assert all(result.ok for result in results)
    channel_map = build_channel_map(results)
    assert list(channel_map) == ["stable", "daily", "experimental", "patch"]
    assert channel_map["patch"][0].tag == "patch"


def test_failed_channel_is_omitted(config):
    results = asyncio.run(run_collector(config, scrape=_fake_scrape(failures={"experimental"})))

    failed = [result for result in results if not result.ok]
    assert [result.channel for result in failed] == ["experimental"]
    assert failed[0].error == "experimental unavailable"
    assert list(build_channel_map(results)) == ["stable", "daily", "patch"]


def test_unexpected_error_is_contained(config):
    def scrape(channel, config):
        if channel == "daily":
            raise ValueError("bad markup")
        return []

    results = asyncio.run(run_collector(config, scrape=scrape))
    by_channel = {result.channel: result for result in results}
    assert not by_channel["daily"].ok
    assert "bad markup" in by_channel["daily"].error
    assert by_channel["stable"].records == []


def test_configured_channels_only():
    config = ScrapeConfig(channels=("daily",), max_workers=1)
    results = asyncio.run(run_collector(config, scrape=_fake_scrape()))
    assert [result.channel for result in results] == ["stable", "daily"]


def test_empty_collection_counts_as_success():
    result = ChannelResult("patch", [], 0.1)
    assert result.ok
    assert build_channel_map([result]) == {"patch": []}


def test_collect_releases_dispatches_to_scrapers(config):
    with patch("blender_releases.collector.scrape_stable") as stable, patch(
        "blender_releases.collector.scrape_archive"
    ) as archive:
        stable.return_value = [_record("current-stable")]
        archive.side_effect = lambda channel, cfg: [_record(channel)]
        results = collect_releases(config)

    stable.assert_called_once_with(config)
    assert sorted(call.args[0] for call in archive.call_args_list) == [
        "daily",
        "experimental",
        "patch",
    ]
    assert [len(result.records) for result in results] == [1, 1, 1, 1]
