"""Shared pytest fixtures for TICKETEER tests."""

from pathlib import Path

import pytest

# Enable pytest-asyncio for async test support
pytest_plugins = ("pytest_asyncio",)

YOUTRACK_PAGE = """<!DOCTYPE html>
<html>
  <head><title>TT-1 Support YouTrack</title></head>
  <body>
    <yt-page-loader></yt-page-loader>
    <div id="app"></div>
  </body>
</html>
"""


@pytest.fixture
def youtrack_page_file(tmp_path: Path) -> Path:
    """Saved YouTrack page HTML."""
    page = tmp_path / "page.html"
    page.write_text(YOUTRACK_PAGE, encoding="utf-8")
    return page


@pytest.fixture
def plain_page_file(tmp_path: Path) -> Path:
    """Saved page HTML without any tracker markers."""
    page = tmp_path / "plain.html"
    page.write_text("<html><body><p>Hello</p></body></html>", encoding="utf-8")
    return page
