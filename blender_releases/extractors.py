"""Field extractors for build list items.

Every extractor pulls one semantic field out of a parsed element and returns
``None`` when the field is absent or malformed. Whether a missing field skips
the build or falls back to a default is decided by the assembler.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from typing import Optional, Tuple

from bs4 import BeautifulSoup, Tag

from .models import Version
from .utils import element_attr, element_text, link_filename, strip_archive_suffix

logger = logging.getLogger("blender_releases")

# Builder page
BUILD_DETAILS_SELECTOR = "ul.build-details"
PRIMARY_LINK_SELECTOR = "a:first-child"
ARCHIVE_LINK_SELECTOR = ".build-meta a"
DOWNLOAD_TYPE_SELECTOR = "li[title='File extension']"
DOWNLOAD_SIZE_SELECTOR = "li[title='File size']"
RELEASE_DATE_SELECTOR = "li:first-child"
TAG_SELECTOR = ".build-var"
CHECKSUM_SELECTOR = "a.sha"
GA_LABEL_SELECTOR = "a.build-title"
BUILD_LABEL_SELECTOR = ".build-meta span.build-architecture[title='Architecture']"

# Stable page
STABLE_SIZE_SELECTOR = "span.size"
STABLE_LINK_SELECTOR = "a"
STABLE_ARCH_SELECTOR = "span.build"
INFO_PANEL_DATE_SELECTOR = "#menu-info-{key} > small"
INFO_PANEL_CHECKSUM_SELECTOR = "#menu-info-{key} > small.checksum a"

BUILDER_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
STABLE_DATE_FORMAT = "%B %d, %Y"
STABLE_DATE_PATTERN = re.compile(r"Released on ([A-Za-z]+ \d{1,2}, \d{4})")
VERSION_COMPONENT_PATTERN = re.compile(r"^\d+$")
MAX_VERSION_COMPONENT = 127


def find_build_details(item: Tag) -> Optional[Tag]:
    return item.select_one(BUILD_DETAILS_SELECTOR)


def extract_primary_link(item: Tag) -> Optional[str]:
    """Return the ``href`` of the first link in the build item."""
    return element_attr(item.select_one(PRIMARY_LINK_SELECTOR), "href")


def extract_archive_link(item: Tag) -> Optional[str]:
    """Return the first link inside the build meta container, if any."""
    return element_attr(item.select_one(ARCHIVE_LINK_SELECTOR), "href")


def _titled_text(item: Tag, selector: str) -> Optional[str]:
    element = item.select_one(selector)
    if element is None:
        return None
    return element_text(element)


def normalize_download_type(value: str) -> str:
    """Lowercase a file extension and drop a leading dot or trailing slash."""
    return value.strip().lower().rstrip("/").lstrip(".")


def extract_download_type(item: Tag) -> Optional[str]:
    raw = _titled_text(item, DOWNLOAD_TYPE_SELECTOR)
    if raw is None:
        return None
    return normalize_download_type(raw)


def extract_download_size(item: Tag) -> Optional[str]:
    return _titled_text(item, DOWNLOAD_SIZE_SELECTOR)


def parse_version_triple(token: str) -> Optional[Version]:
    """Parse ``major.minor.patch`` into three small integers."""
    parts = token.split(".")
    if len(parts) != 3:
        return None
    if not all(VERSION_COMPONENT_PATTERN.match(part) for part in parts):
        return None
    major, minor, patch = (int(part) for part in parts)
    if max(major, minor, patch) > MAX_VERSION_COMPONENT:
        return None
    return major, minor, patch


def parse_version(filename: str) -> Optional[Tuple[Version, str]]:
    """Split a build filename such as ``product-1.2.3-abcdef.zip``.

    The second dash-delimited token carries the version and the third the
    build detail. Returns ``((1, 2, 3), "abcdef")`` for the example above.
    """
    tokens = filename.split("-")
    if len(tokens) < 3:
        return None
    version = parse_version_triple(tokens[1])
    if version is None:
        return None
    detail = tokens[2]
    if len(tokens) == 3:
        detail = strip_archive_suffix(detail)
    return version, detail


def parse_stable_version(download_link: str) -> Optional[Version]:
    tokens = link_filename(download_link).split("-")
    if len(tokens) < 2:
        return None
    return parse_version_triple(tokens[1])


def extract_release_date(build_details: Tag) -> Optional[dt.datetime]:
    """Parse the timestamp stored in the ``title`` of the first details entry.

    The UTC offset is validated but dropped; the wall-clock time is kept.
    """
    value = element_attr(build_details.select_one(RELEASE_DATE_SELECTOR), "title")
    if value is None:
        return None
    try:
        parsed = dt.datetime.strptime(value, BUILDER_DATE_FORMAT)
    except ValueError:
        logger.debug("Unparseable build date %r", value)
        return None
    return parsed.replace(tzinfo=None)


def extract_tag(item: Tag) -> Optional[str]:
    return _titled_text(item, TAG_SELECTOR)


def extract_checksum(item: Tag) -> Optional[str]:
    return element_attr(item.select_one(CHECKSUM_SELECTOR), "href")


def extract_ga_label(item: Tag) -> Optional[str]:
    """Return the lowercase analytics label of the build title link."""
    value = element_attr(item.select_one(GA_LABEL_SELECTOR), "ga_label")
    return value.lower() if value is not None else None


def extract_build_label(item: Tag) -> Optional[str]:
    return _titled_text(item, BUILD_LABEL_SELECTOR)


def extract_stable_size(item: Tag) -> Optional[str]:
    return _titled_text(item, STABLE_SIZE_SELECTOR)


def extract_stable_link(item: Tag) -> Optional[str]:
    return element_attr(item.select_one(STABLE_LINK_SELECTOR), "href")


def extract_stable_download_type(download_link: str) -> Optional[str]:
    """Derive the file extension from the last path segment of a stable link."""
    filename = link_filename(download_link)
    if "." not in filename:
        return None
    return normalize_download_type(filename.rsplit(".", 1)[-1])


def extract_class_names(item: Tag) -> str:
    return element_attr(item, "class") or ""


def extract_stable_arch_text(item: Tag) -> str:
    return _titled_text(item, STABLE_ARCH_SELECTOR) or ""


def find_release_note(document: BeautifulSoup, panel_key: str) -> Optional[str]:
    """Return the raw "Released on ..." sentence from a platform info panel."""
    note = document.select_one(INFO_PANEL_DATE_SELECTOR.format(key=panel_key))
    if note is None:
        return None
    return element_text(note)


def parse_stable_date(note: str) -> Optional[dt.datetime]:
    match = STABLE_DATE_PATTERN.search(note)
    if match is None:
        return None
    value = match.group(1)
    try:
        return dt.datetime.strptime(value, STABLE_DATE_FORMAT)
    except ValueError:
        logger.debug("Unparseable release note date %r", value)
        return None


def extract_stable_checksum(document: BeautifulSoup, panel_key: str) -> Optional[str]:
    """Return the second checksum link of an info panel; the first points elsewhere."""
    links = document.select(INFO_PANEL_CHECKSUM_SELECTOR.format(key=panel_key))
    if len(links) < 2:
        return None
    return element_attr(links[1], "href")
