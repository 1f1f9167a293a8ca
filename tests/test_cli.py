"""Tests for the command-line entry point."""

import datetime as dt
import json
from unittest.mock import patch

from blender_releases.cli import main, parse_args
from blender_releases.collector import ChannelResult
from blender_releases.models import ReleaseRecord, SingleDownload


def _record():
    return ReleaseRecord(
        version=(4, 2, 3),
        version_detail="",
        download=SingleDownload(download_link="https://example.org/blender-4.2.3-linux-x64.tar.xz/"),
        download_type="xz",
        download_size="360MB",
        release_date=dt.datetime(2024, 10, 15),
        tag="current-stable",
        os="linux",
        arch="x86_64",
    )


def test_defaults():
    args = parse_args([])
    assert args.channels is None
    assert args.timeout == 30.0
    assert args.workers == 4
    assert args.indent is None


@patch("blender_releases.cli.collect_releases")
def test_prints_json_and_succeeds(mock_collect, capsys):
    mock_collect.return_value = [
        ChannelResult("stable", [_record()], 0.2),
        ChannelResult("daily", [], 0.1),
        ChannelResult("experimental", None, 0.1, error="timeout"),
        ChannelResult("patch", [], 0.1),
    ]

    exit_code = main([])

    assert exit_code == 0
    out = capsys.readouterr().out
    document = json.loads(out)
    assert list(document) == ["stable", "daily", "patch"]
    assert document["stable"][0]["download_link"] == "https://example.org/blender-4.2.3-linux-x64.tar.xz/"
    config = mock_collect.call_args.args[0]
    assert config.channels == ("daily", "experimental", "patch")


@patch("blender_releases.cli.collect_releases")
def test_all_channels_failed(mock_collect, capsys):
    mock_collect.return_value = [
        ChannelResult("stable", None, 0.1, error="down"),
        ChannelResult("daily", None, 0.1, error="down"),
    ]

    exit_code = main(["--quiet"])

    assert exit_code == 1
    assert json.loads(capsys.readouterr().out) == {}


@patch("blender_releases.cli.collect_releases")
def test_channel_and_timeout_flags(mock_collect, capsys):
    mock_collect.return_value = [ChannelResult("stable", [], 0.1), ChannelResult("patch", [], 0.1)]

    main(["--channel", "patch", "--channel", "patch", "--timeout", "5", "--workers", "1", "--indent", "2"])

    config = mock_collect.call_args.args[0]
    assert config.channels == ("patch",)
    assert config.timeout == 5.0
    assert config.max_workers == 1
    out = capsys.readouterr().out
    assert out.startswith("{\n  ")


@patch("blender_releases.cli.collect_releases")
def test_schema_flag_prints_schema_without_scraping(mock_collect, capsys):
    exit_code = main(["--schema"])

    assert exit_code == 0
    mock_collect.assert_not_called()
    schema = json.loads(capsys.readouterr().out)
    assert schema["type"] == "object"
    assert len(schema["additionalProperties"]["items"]["oneOf"]) == 2
