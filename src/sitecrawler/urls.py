"""
URL resolution and scope filters.
"""
from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import SplitResult, urljoin, urlsplit

logger = logging.getLogger(__name__)

ABSOLUTE_PREFIXES = ("http://", "https://")


def _parse_absolute(url: str) -> Optional[SplitResult]:
    """Split URL, or return None unless it has a scheme and a host."""
    try:
        parsed = urlsplit(url)
        # .port validates the port and raises ValueError when it is bad
        parsed.port
    except ValueError:
        return None
    if not parsed.scheme or not parsed.hostname:
        return None
    return parsed


def try_join(base: str, href: str) -> Optional[str]:
    """
    Strict relative resolution. Returns None when base is not an absolute URL
    or the join itself fails.

    Hrefs with their own non-http scheme (mailto:, tel:, javascript:) come
    back unchanged, so the domain filter sees them as off-site.
    """
    if _parse_absolute(base) is None:
        return None
    try:
        return urljoin(base, href)
    except ValueError:
        return None


def resolve(base: str, href: str) -> str:
    """
    Turn href into an absolute URL using base.

    - Absolute http(s) hrefs are returned as-is
    - Relative hrefs are joined against base
    - If joining fails, base and href are concatenated with a single '/'

    Never raises; the concatenated form may still fail later at fetch time.
    """
    if href.startswith(ABSOLUTE_PREFIXES):
        return href

    joined = try_join(base, href)
    if joined is not None:
        return joined

    head = base[:-1] if base.endswith("/") else base
    tail = href[1:] if href.startswith("/") else href
    logger.debug("Join failed for %r against %r, concatenating", href, base)
    return f"{head}/{tail}"


def same_domain(root: str, candidate: str) -> bool:
    """True if both URLs parse and share the same host."""
    root_parsed = _parse_absolute(root)
    candidate_parsed = _parse_absolute(candidate)
    if root_parsed is None or candidate_parsed is None:
        return False
    return root_parsed.hostname == candidate_parsed.hostname


def path_segments(url: str) -> Optional[List[str]]:
    """Non-empty path segments of url, or None if it does not parse."""
    parsed = _parse_absolute(url)
    if parsed is None:
        return None
    return [segment for segment in parsed.path.split("/") if segment]


def exceeds_depth(candidate: str, depth_limit: int) -> bool:
    """
    Depth cutoff check.

    A limit of 0 disables the check. Otherwise the candidate is cut off when
    its number of path segments equals depth_limit exactly. Unparseable
    candidates are never cut off.
    """
    if depth_limit == 0:
        return False
    segments = path_segments(candidate)
    if segments is None:
        return False
    return len(segments) == depth_limit
