"""
Breadth-first crawler that inventories the pages reachable from a root URL.
"""
__version__ = "1.0.0"

from sitecrawler.core import CrawlConfig, CrawlResult, CrawlStats, Crawler, crawl, extract_links
from sitecrawler.fetcher import FetchError, FetchErrorKind, Fetcher
from sitecrawler.urls import exceeds_depth, resolve, same_domain

__all__ = [
    "CrawlConfig",
    "CrawlResult",
    "CrawlStats",
    "Crawler",
    "FetchError",
    "FetchErrorKind",
    "Fetcher",
    "crawl",
    "exceeds_depth",
    "extract_links",
    "resolve",
    "same_domain",
]
