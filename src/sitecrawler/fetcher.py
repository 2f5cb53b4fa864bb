"""
HTTP transport for the crawler.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


class FetchErrorKind(str, Enum):
    """Classification of a failed fetch."""
    HTTP_STATUS = "http_status"
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    REQUEST = "request"
    UNKNOWN = "unknown"


class FetchError(Exception):
    """A fetch that did not produce a 2xx body."""

    def __init__(
        self,
        kind: FetchErrorKind,
        url: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.kind = kind
        self.url = url
        self.cause = cause
        self.status_code = status_code
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.kind is FetchErrorKind.HTTP_STATUS:
            return f"HTTP {self.status_code} for {self.url}"
        reason = f"{self.kind.value} error for {self.url}"
        if self.cause is not None:
            reason += f": {self.cause}"
        return reason


def classify(exc: requests.RequestException) -> FetchErrorKind:
    """Map a requests exception onto a FetchErrorKind."""
    # ConnectTimeout is both a Timeout and a ConnectionError
    if isinstance(exc, requests.Timeout):
        return FetchErrorKind.TIMEOUT
    if isinstance(exc, requests.ConnectionError):
        return FetchErrorKind.CONNECTION
    if isinstance(exc, requests.HTTPError):
        return FetchErrorKind.HTTP_STATUS
    if isinstance(exc, (requests.exceptions.InvalidURL,
                        requests.exceptions.MissingSchema,
                        requests.exceptions.InvalidSchema,
                        requests.exceptions.InvalidHeader,
                        requests.exceptions.URLRequired)):
        return FetchErrorKind.REQUEST
    return FetchErrorKind.UNKNOWN


class Fetcher:
    """Sequential page fetcher backed by a requests.Session."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()
        if user_agent:
            self.session.headers["User-Agent"] = user_agent

    def fetch(self, url: str) -> str:
        """
        Return the body of url.

        Raises:
            FetchError: on any transport failure or non-2xx status.
        """
        try:
            resp = self.session.get(url, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as e:
            raise FetchError(classify(e), url, cause=e) from e

        if not 200 <= resp.status_code < 300:
            raise FetchError(FetchErrorKind.HTTP_STATUS, url, status_code=resp.status_code)

        logger.debug("Fetched %s (%d, %s)", url, resp.status_code,
                     resp.headers.get("content-type", "unknown type"))
        return resp.text

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
