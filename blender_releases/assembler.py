"""Assemble release records from build list items.

Each field is either required or optional. A missing required field skips
the whole build item, an optional one falls back to its default, and no
partial record is ever emitted.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Iterable, List, Optional, TypeVar

from bs4 import BeautifulSoup, Tag

from . import extractors
from .models import ReleaseRecord, SingleDownload, SplitDownload
from .platforms import (
    arch_from_build_label,
    arch_from_ga_label,
    arch_from_stable_text,
    os_from_classes,
    os_from_ga_label,
    stable_info_panel_key,
)
from .utils import link_filename

logger = logging.getLogger("blender_releases")

T = TypeVar("T")

DEFAULT_TAG = "Unknown"
STABLE_TAG = "current-stable"
DECOY_MARKER = "sha256"


class SkipBuild(Exception):
    """Raised inside the assembler when a build item cannot produce a record."""


def _required(value: Optional[T], field: str) -> T:
    if value is None:
        raise SkipBuild(f"missing {field}")
    return value


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None, microsecond=0)


def _build_record(item: Tag) -> ReleaseRecord:
    build_details = _required(extractors.find_build_details(item), "build details")
    download_link = _required(extractors.extract_primary_link(item), "download link")
    archive_link = extractors.extract_archive_link(item)
    download_type = _required(extractors.extract_download_type(item), "file extension")
    download_size = _required(extractors.extract_download_size(item), "file size")
    version, version_detail = _required(
        extractors.parse_version(link_filename(download_link)), "version"
    )
    release_date = _required(extractors.extract_release_date(build_details), "release date")
    tag = extractors.extract_tag(item)
    if tag is None:
        tag = DEFAULT_TAG
    sha256 = extractors.extract_checksum(item) or ""
    ga_label = _required(extractors.extract_ga_label(item), "analytics label")
    if DECOY_MARKER in ga_label:
        raise SkipBuild("checksum-only entry")

    build_label = extractors.extract_build_label(item)
    if build_label is not None:
        arch = arch_from_build_label(build_label)
    else:
        arch = arch_from_ga_label(ga_label)

    if archive_link:
        download = SplitDownload(
            download_link_installer=download_link,
            download_link_archive=archive_link,
        )
    else:
        download = SingleDownload(download_link=download_link)

    return ReleaseRecord(
        version=version,
        version_detail=version_detail,
        download=download,
        download_type=download_type,
        download_size=download_size,
        release_date=release_date,
        tag=tag,
        os=os_from_ga_label(ga_label),
        arch=arch,
        sha256=sha256,
        ga_label=ga_label,
    )


def _stable_record(item: Tag, document: BeautifulSoup, now: dt.datetime) -> ReleaseRecord:
    download_size = _required(extractors.extract_stable_size(item), "size")
    download_link = _required(extractors.extract_stable_link(item), "download link")
    version = _required(extractors.parse_stable_version(download_link), "version")

    os_name = os_from_classes(extractors.extract_class_names(item))
    arch = arch_from_stable_text(extractors.extract_stable_arch_text(item))
    panel_key = stable_info_panel_key(os_name, arch)

    sha256 = extractors.extract_stable_checksum(document, panel_key) or ""
    note = extractors.find_release_note(document, panel_key)
    if note is None:
        release_date = now
    else:
        release_date = _required(extractors.parse_stable_date(note), "release date")

    return ReleaseRecord(
        version=version,
        version_detail="",
        download=SingleDownload(download_link=download_link),
        download_type=extractors.extract_stable_download_type(download_link) or "",
        download_size=download_size,
        release_date=release_date,
        tag=STABLE_TAG,
        os=os_name,
        arch=arch,
        sha256=sha256,
        ga_label="",
    )


def assemble_builder_record(item: Tag) -> Optional[ReleaseRecord]:
    """Build a record from one builder page list item, or None to skip it."""
    try:
        return _build_record(item)
    except SkipBuild as exc:
        logger.debug("Skipping build item: %s", exc)
        return None


def assemble_stable_record(
    item: Tag,
    document: BeautifulSoup,
    now: Optional[dt.datetime] = None,
) -> Optional[ReleaseRecord]:
    """Build a record from one stable page platform item.

    Date and checksum come from the platform's info panel elsewhere in
    ``document``; when the panel is absent the release date falls back to ``now``.
    """
    try:
        return _stable_record(item, document, now or _utc_now())
    except SkipBuild as exc:
        logger.debug("Skipping stable item: %s", exc)
        return None


def assemble_builder_records(items: Iterable[Tag]) -> List[ReleaseRecord]:
    records: List[ReleaseRecord] = []
    for item in items:
        record = assemble_builder_record(item)
        if record is not None:
            records.append(record)
    return records


def assemble_stable_records(
    items: Iterable[Tag],
    document: BeautifulSoup,
    now: Optional[dt.datetime] = None,
) -> List[ReleaseRecord]:
    now = now or _utc_now()
    records: List[ReleaseRecord] = []
    for item in items:
        record = assemble_stable_record(item, document, now)
        if record is not None:
            records.append(record)
    return records
