"""Test the requests-backed fetcher."""

from unittest.mock import MagicMock

import pytest
import requests

from sitecrawler.fetcher import FetchError, FetchErrorKind, Fetcher, classify

URL = "https://example.com/page"


def make_response(status_code=200, text="<html></html>", content_type="text/html"):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    resp.headers = {"content-type": content_type}
    return resp


@pytest.fixture
def session():
    s = MagicMock(spec=requests.Session)
    s.headers = {}
    return s


class TestFetcher:

    def test_returns_body_on_2xx(self, session):
        session.get.return_value = make_response(200, "<a href='/x'>x</a>")
        fetcher = Fetcher(timeout=3.0, session=session)
        assert fetcher.fetch(URL) == "<a href='/x'>x</a>"
        session.get.assert_called_once_with(URL, timeout=3.0, allow_redirects=True)

    def test_non_html_body_is_returned(self, session):
        session.get.return_value = make_response(204, "plain text", "text/plain")
        assert Fetcher(session=session).fetch(URL) == "plain text"

    @pytest.mark.parametrize("status", [301, 404, 500, 503])
    def test_non_2xx_raises_http_status(self, session, status):
        session.get.return_value = make_response(status)
        with pytest.raises(FetchError) as exc_info:
            Fetcher(session=session).fetch(URL)
        err = exc_info.value
        assert err.kind is FetchErrorKind.HTTP_STATUS
        assert err.status_code == status
        assert err.url == URL
        assert str(status) in str(err)

    @pytest.mark.parametrize("exc, kind", [
        (requests.Timeout("slow"), FetchErrorKind.TIMEOUT),
        (requests.exceptions.ConnectTimeout("slow connect"), FetchErrorKind.TIMEOUT),
        (requests.ConnectionError("refused"), FetchErrorKind.CONNECTION),
        (requests.exceptions.InvalidURL("bad"), FetchErrorKind.REQUEST),
        (requests.exceptions.MissingSchema("no scheme"), FetchErrorKind.REQUEST),
        (requests.exceptions.TooManyRedirects("loop"), FetchErrorKind.UNKNOWN),
    ])
    def test_transport_errors_are_classified(self, session, exc, kind):
        session.get.side_effect = exc
        with pytest.raises(FetchError) as exc_info:
            Fetcher(session=session).fetch(URL)
        assert exc_info.value.kind is kind
        assert exc_info.value.cause is exc
        assert exc_info.value.url == URL

    def test_user_agent_header(self, session):
        Fetcher(user_agent="TestAgent/1.0", session=session)
        assert session.headers["User-Agent"] == "TestAgent/1.0"

    def test_context_manager_closes_session(self, session):
        with Fetcher(session=session):
            pass
        session.close.assert_called_once()


class TestClassify:

    def test_http_error(self):
        assert classify(requests.HTTPError("500")) is FetchErrorKind.HTTP_STATUS

    def test_generic_request_exception(self):
        assert classify(requests.RequestException("?")) is FetchErrorKind.UNKNOWN
