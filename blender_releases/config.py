"""Configuration objects and constants for the release scraper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

BUILDER_URL_TEMPLATE = "https://builder.blender.org/download/{channel}/"
STABLE_URL = "https://www.blender.org/download/"
STABLE_CHANNEL = "stable"
ARCHIVE_CHANNELS = ("daily", "experimental", "patch")
DEFAULT_USER_AGENT = "blender-releases/0.1 (+https://www.blender.org/download/)"


@dataclass
class ScrapeConfig:
    """Top-level settings that control fetching and scraping behaviour."""

    builder_url_template: str = BUILDER_URL_TEMPLATE
    stable_url: str = STABLE_URL
    channels: Tuple[str, ...] = ARCHIVE_CHANNELS
    timeout: float = 30.0
    max_workers: int = 4
    user_agent: str = DEFAULT_USER_AGENT

    def archive_url(self, channel: str) -> str:
        return self.builder_url_template.format(channel=channel)
