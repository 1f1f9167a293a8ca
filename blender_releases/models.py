"""Data models used throughout the scraping pipeline."""

from __future__ import annotations

import datetime as dt
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

Version = Tuple[int, int, int]


@dataclass(frozen=True)
class SingleDownload:
    """One download location per build (stable page and most builder items)."""

    download_link: str

    def as_fields(self) -> Dict[str, str]:
        return {"download_link": self.download_link}


@dataclass(frozen=True)
class SplitDownload:
    """Builder items that publish an installer next to a plain archive."""

    download_link_installer: str
    download_link_archive: str

    def as_fields(self) -> Dict[str, str]:
        return {
            "download_link_installer": self.download_link_installer,
            "download_link_archive": self.download_link_archive,
        }


Download = Union[SingleDownload, SplitDownload]


@dataclass(frozen=True)
class ReleaseRecord:
    """A single downloadable build artifact."""

    version: Version
    version_detail: str
    download: Download
    download_type: str
    download_size: str
    release_date: dt.datetime
    tag: str
    os: str
    arch: str
    sha256: str = ""
    ga_label: str = ""

    @property
    def primary_link(self) -> str:
        if isinstance(self.download, SplitDownload):
            return self.download.download_link_installer
        return self.download.download_link

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the public field layout, preserving field order."""
        payload: Dict[str, Any] = {
            "version": list(self.version),
            "version_detail": self.version_detail,
        }
        payload.update(self.download.as_fields())
        payload.update(
            {
                "download_type": self.download_type,
                "download_size": self.download_size,
                "release_date": self.release_date.strftime(DATE_FORMAT),
                "tag": self.tag,
                "os": self.os,
                "arch": self.arch,
                "sha256": self.sha256,
                "ga_label": self.ga_label,
            }
        )
        return payload


ReleaseCollection = List[ReleaseRecord]
ChannelMap = Dict[str, ReleaseCollection]


def channel_map_to_dict(channel_map: ChannelMap) -> Dict[str, List[Dict[str, Any]]]:
    return {
        channel: [record.to_dict() for record in records]
        for channel, records in channel_map.items()
    }


def channel_map_to_json(channel_map: ChannelMap, indent: Optional[int] = None) -> str:
    """Render the channel map as the JSON document written to stdout."""
    return json.dumps(channel_map_to_dict(channel_map), indent=indent)


def record_schema() -> Dict[str, Any]:
    """JSON Schema describing the channel map document and its release records."""
    string = {"type": "string"}
    common = {
        "version": {
            "type": "array",
            "items": {"type": "integer", "minimum": 0, "maximum": 127},
            "minItems": 3,
            "maxItems": 3,
        },
        "version_detail": string,
        "download_type": string,
        "download_size": string,
        "release_date": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$"},
        "tag": string,
        "os": {"type": "string", "enum": ["windows", "linux", "darwin", "mac", "unknown"]},
        "arch": {"type": "string", "enum": ["x86_64", "arm64", "unknown"]},
        "sha256": string,
        "ga_label": string,
    }

    def variant(link_fields: Tuple[str, ...]) -> Dict[str, Any]:
        properties = dict(common)
        properties.update({name: string for name in link_fields})
        return {
            "type": "object",
            "properties": properties,
            "required": list(properties),
            "additionalProperties": False,
        }

    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "title": "Blender releases by channel",
        "type": "object",
        "additionalProperties": {
            "type": "array",
            "items": {
                "oneOf": [
                    variant(("download_link",)),
                    variant(("download_link_installer", "download_link_archive")),
                ]
            },
        },
    }
