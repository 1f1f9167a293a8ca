"""Fetch download pages and turn their build lists into release records."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

import requests
from bs4 import BeautifulSoup

from .assembler import assemble_builder_records, assemble_stable_records
from .config import ScrapeConfig
from .models import ReleaseCollection

logger = logging.getLogger("blender_releases")

BUILDS_LIST_SELECTOR = ".builds-list > li"
STABLE_PLATFORMS_SELECTOR = "#menu-other-platforms li.os"


class ScrapeError(RuntimeError):
    """A page could not be fetched or is not an HTML document."""


def fetch_html(session: requests.Session, url: str, config: ScrapeConfig) -> str:
    """Download a page and return its body, raising ScrapeError on failure."""
    logger.info("Loading %s", url)
    try:
        resp = session.get(
            url,
            timeout=config.timeout,
            headers={"User-Agent": config.user_agent},
        )
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise ScrapeError(f"Failed to fetch {url}: {exc}") from exc

    content_type = resp.headers.get("Content-Type", "")
    if content_type and "html" not in content_type.lower():
        raise ScrapeError(f"Unexpected content type for {url}: {content_type}")
    return resp.text


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _open_session(session: Optional[requests.Session]) -> requests.Session:
    return session if session is not None else requests.Session()


def scrape_archive(
    channel: str,
    config: ScrapeConfig,
    session: Optional[requests.Session] = None,
) -> ReleaseCollection:
    """Scrape the builder archive page for one channel (daily, experimental, patch)."""
    http = _open_session(session)
    try:
        html = fetch_html(http, config.archive_url(channel), config)
    finally:
        if session is None:
            http.close()

    document = parse_document(html)
    items = document.select(BUILDS_LIST_SELECTOR)
    records = assemble_builder_records(items)
    logger.debug("Channel %s: %d/%d build items kept", channel, len(records), len(items))
    return records


def scrape_stable(
    config: ScrapeConfig,
    session: Optional[requests.Session] = None,
    now: Optional[dt.datetime] = None,
) -> ReleaseCollection:
    """Scrape the stable download page.

    Platform items only carry the link, size and architecture; the release
    date and checksum are read from the matching ``#menu-info-*`` panel.
    """
    http = _open_session(session)
    try:
        html = fetch_html(http, config.stable_url, config)
    finally:
        if session is None:
            http.close()

    document = parse_document(html)
    items = document.select(STABLE_PLATFORMS_SELECTOR)
    records = assemble_stable_records(items, document, now)
    logger.debug("Stable: %d/%d platform items kept", len(records), len(items))
    return records
