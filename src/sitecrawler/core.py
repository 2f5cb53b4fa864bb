"""
Core crawling logic and data structures.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Set

from bs4 import BeautifulSoup, SoupStrainer

from sitecrawler.fetcher import DEFAULT_TIMEOUT, FetchError, Fetcher
from sitecrawler.output import OutputTarget
from sitecrawler.urls import exceeds_depth, resolve, same_domain

logger = logging.getLogger(__name__)

# SoupStrainer to parse only <a> tags (faster link extraction)
LINK_STRAINER = SoupStrainer("a")


class PageFetcher(Protocol):
    def fetch(self, url: str) -> str: ...


@dataclass(frozen=True, slots=True)
class CrawlConfig:
    """Per-run settings, built once and never mutated."""
    root: str
    depth: int = 0
    verbose: bool = False
    include_errors: bool = False
    output: OutputTarget = field(default_factory=OutputTarget)
    timeout: float = DEFAULT_TIMEOUT
    user_agent: Optional[str] = None


@dataclass(slots=True)
class CrawlStats:
    """Statistics collected during crawl for summary output."""
    pages_fetched: int = 0
    depth_cutoffs: int = 0
    off_domain: int = 0
    layers: int = 0
    error_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_error(self, error: FetchError) -> None:
        """Record an error by kind (HTTP errors by status code)."""
        if error.status_code is not None:
            self.error_counts[str(error.status_code)] += 1
        else:
            self.error_counts[error.kind.value] += 1


@dataclass(slots=True)
class CrawlResult:
    root: str
    visited: List[str]
    errors: List[str]
    stats: CrawlStats


def extract_links(html: str, base: str) -> List[str]:
    """
    Resolve the href of every <a> tag in html against base.

    Anchors without href are skipped. Duplicates are dropped, keeping the
    first occurrence. Broken markup is parsed leniently.
    """
    soup = BeautifulSoup(html, "lxml", parse_only=LINK_STRAINER)
    links: Dict[str, None] = {}
    for a in soup.find_all("a"):
        href = a.get("href")
        if href is None:
            continue
        links.setdefault(resolve(base, href), None)
    return list(links)


class Crawler:
    """
    Breadth-first crawl of one site, layer by layer.

    Owns the visited set, the error set and the frontier for a single run.
    """

    def __init__(self, config: CrawlConfig, fetcher: PageFetcher) -> None:
        self.config = config
        self.fetcher = fetcher
        self.visited: Dict[str, None] = {}
        self.errors: Dict[str, FetchError] = {}
        self.frontier: List[str] = []
        self.off_domain: Set[str] = set()
        self.stats = CrawlStats()
        self._report_level = logging.INFO if config.verbose else logging.DEBUG

    def run(self) -> CrawlResult:
        """
        Crawl to a fixed point.

        Raises:
            FetchError: if the root page cannot be fetched.
        """
        self._seed()
        while self.frontier:
            self._process_layer()

        if self.config.include_errors:
            for url in self.errors:
                self.visited.setdefault(url, None)

        return CrawlResult(
            root=self.config.root,
            visited=list(self.visited),
            errors=list(self.errors),
            stats=self.stats,
        )

    def _seed(self) -> None:
        root = self.config.root
        logger.log(self._report_level, "Starting crawl from: %s", root)
        body = self.fetcher.fetch(root)
        self.stats.pages_fetched += 1
        self.visited[root] = None
        self.frontier = extract_links(body, root)

    def _process_layer(self) -> None:
        layer = self.frontier
        self.frontier = []
        self.stats.layers += 1
        logger.debug("Layer %d: %d URLs", self.stats.layers, len(layer))

        for url in layer:
            if url in self.errors:
                self.visited.pop(url, None)
                continue
            if url in self.visited:
                continue
            if not same_domain(self.config.root, url):
                if url not in self.off_domain:
                    self.off_domain.add(url)
                    self.stats.off_domain += 1
                continue
            if exceeds_depth(url, self.config.depth):
                self.visited[url] = None
                self.stats.depth_cutoffs += 1
                logger.log(self._report_level, "cutoff %s", url)
                continue
            self._visit(url)

    def _visit(self, url: str) -> None:
        try:
            body = self.fetcher.fetch(url)
        except FetchError as e:
            self.errors[url] = e
            self.visited.pop(url, None)
            self.stats.record_error(e)
            logger.warning("Fetch failed (%s): %s", e.kind.value, e)
            return

        self.visited[url] = None
        self.stats.pages_fetched += 1
        links = extract_links(body, url)
        self.frontier.extend(links)
        logger.log(self._report_level, "fetched %s (+%d links)", url, len(links))


def crawl(config: CrawlConfig, fetcher: Optional[PageFetcher] = None) -> CrawlResult:
    """
    Crawl a site starting from config.root.

    Args:
        config: Run settings.
        fetcher: Page source; a requests-backed Fetcher is created (and
                 closed afterwards) when omitted.

    Returns:
        The visited URLs, failed URLs and statistics.
    """
    if fetcher is not None:
        return Crawler(config, fetcher).run()

    with Fetcher(timeout=config.timeout, user_agent=config.user_agent) as own_fetcher:
        return Crawler(config, own_fetcher).run()
