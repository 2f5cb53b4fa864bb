"""
Writers for the final visited set.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from sitecrawler.core import CrawlResult

logger = logging.getLogger(__name__)

DEFAULT_TEXT_FILE = "output.txt"
DEFAULT_JSON_FILE = "output.json"


class OutputFormat(str, Enum):
    LOG = "log"
    TEXT = "text"
    JSON = "json"


@dataclass(frozen=True, slots=True)
class OutputTarget:
    """Where and how the visited set is reported."""
    format: OutputFormat = OutputFormat.LOG
    path: Optional[Path] = None


def write_text(path: Path, urls: Iterable[str]) -> None:
    """Write one URL per line."""
    lines = "".join(f"{url}\n" for url in urls)
    path.write_text(lines, encoding="utf-8")


def write_json(path: Path, root: str, urls: Iterable[str]) -> None:
    """Write {"root": ..., "found_urls": [...]}."""
    payload = {"root": root, "found_urls": list(urls)}
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def log_urls(urls: Iterable[str]) -> None:
    """Log each URL at INFO; nothing shows when the log level is above INFO."""
    for url in urls:
        logger.info("%s", url)


def write_result(result: "CrawlResult", target: OutputTarget) -> None:
    """
    Report a finished crawl.

    Raises:
        OSError: if the destination file cannot be written.
    """
    urls: List[str] = result.visited

    if target.format is OutputFormat.LOG:
        log_urls(urls)
        return

    if target.path is None:
        raise ValueError(f"{target.format.value} output needs a file path")

    if target.format is OutputFormat.TEXT:
        write_text(target.path, urls)
    else:
        write_json(target.path, result.root, urls)
    logger.info("Wrote %d URLs to %s", len(urls), target.path)
