"""Shared pytest fixtures."""

import datetime as dt
from unittest.mock import Mock

import pytest
from bs4 import BeautifulSoup

from blender_releases.config import ScrapeConfig
from tests.fixtures.html_samples import STABLE_PAGE, builder_item


@pytest.fixture
def make_item():
    """Parse a single builder list item rendered by ``builder_item``."""

    def _make(**kwargs):
        soup = BeautifulSoup(
            '<ul class="builds-list">' + builder_item(**kwargs) + "</ul>", "html.parser"
        )
        return soup.select_one(".builds-list > li")

    return _make


@pytest.fixture
def stable_document():
    return BeautifulSoup(STABLE_PAGE, "html.parser")


@pytest.fixture
def fixed_now():
    return dt.datetime(2026, 1, 2, 3, 4, 5)


@pytest.fixture
def config():
    return ScrapeConfig(timeout=5.0, max_workers=2)


@pytest.fixture
def make_response():
    """Build a mock requests.Response."""

    def _make(text="", status_code=200, content_type="text/html; charset=utf-8"):
        resp = Mock()
        resp.text = text
        resp.status_code = status_code
        resp.headers = {"Content-Type": content_type} if content_type else {}
        resp.raise_for_status = Mock()
        return resp

    return _make
