"""Utility helpers for string normalization and link handling."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlparse

from bs4 import Tag

WHITESPACE_PATTERN = re.compile(r"\s+")
ARCHIVE_SUFFIX_PATTERN = re.compile(
    r"\.(zip|dmg|msi|msix|exe|pkg|sha256|tar\.[a-z0-9]+)$", re.IGNORECASE
)


def element_text(element: Tag) -> str:
    """Collapse the visible text of an element into a single trimmed line."""
    return WHITESPACE_PATTERN.sub(" ", element.get_text()).strip()


def element_attr(element: Optional[Tag], name: str) -> Optional[str]:
    """Return a stripped attribute value, or None when the element or attribute is absent.

    A present but empty attribute yields an empty string.
    """
    if element is None:
        return None
    value = element.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    if value is None:
        return None
    return value.strip()


def link_filename(url: str) -> str:
    """Return the last non-empty path segment of a download URL."""
    path = urlparse(url).path or url
    segments = [segment for segment in path.split("/") if segment]
    return segments[-1] if segments else ""


def strip_archive_suffix(value: str) -> str:
    """Drop a trailing archive or installer extension such as ``.zip`` or ``.tar.xz``."""
    return ARCHIVE_SUFFIX_PATTERN.sub("", value)
