"""Test fixtures for the crawler tests."""

from typing import Dict, List, Optional

import pytest

from sitecrawler.fetcher import FetchError, FetchErrorKind


class FakeFetcher:
    """In-memory site: url -> html. Unknown URLs fail with HTTP 404."""

    def __init__(self, pages: Dict[str, str], failures: Optional[Dict[str, FetchErrorKind]] = None):
        self.pages = pages
        self.failures = failures or {}
        self.calls: List[str] = []

    def fetch(self, url: str) -> str:
        self.calls.append(url)
        if url in self.failures:
            raise FetchError(self.failures[url], url, cause=RuntimeError("boom"))
        if url not in self.pages:
            raise FetchError(FetchErrorKind.HTTP_STATUS, url, status_code=404)
        return self.pages[url]


def page(*hrefs: str) -> str:
    anchors = "".join(f'<a href="{href}">link</a>' for href in hrefs)
    return f"<html><body>{anchors}</body></html>"


@pytest.fixture
def make_fetcher():
    return FakeFetcher


@pytest.fixture
def cyclic_site():
    """Root links to /a; /a links back to root and off-site."""
    return {
        "https://example.com/": page("/a"),
        "https://example.com/a": page("https://example.com/", "https://other.com/x"),
    }
