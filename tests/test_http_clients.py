"""Tests for the feed fetcher and the email client over a mock transport."""

import json

import httpx
import pytest

from malainaadu.alerts import ResendMailer
from malainaadu.errors import EmailError
from malainaadu.ingestion import FeedFetcher
from malainaadu.models import Source

from tests.conftest import mock_client


@pytest.fixture
def source():
    return Source(id=1, name="Bernama", rss_url="https://bernama.example/rss")


def test_fetch_sends_identifying_headers(source):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, text="<rss/>")

    result = FeedFetcher(client=mock_client(handler)).fetch(source)

    assert result.success is True
    assert result.text == "<rss/>"
    assert seen[0].headers["User-Agent"] == "BeritaMalaysia/1.0"
    assert "application/rss+xml" in seen[0].headers["Accept"]


def test_fetch_non_2xx_reports_status(source):
    result = FeedFetcher(client=mock_client(lambda request: httpx.Response(503))).fetch(source)

    assert result.success is False
    assert result.status_code == 503
    assert result.error == "503"


def test_fetch_timeout_is_reported_not_raised(source):
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    result = FeedFetcher(timeout=10.0, client=mock_client(handler)).fetch(source)

    assert result.success is False
    assert result.error == "Request timeout after 10s"


def test_mailer_posts_one_message_to_all_recipients():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"id": "email_1"})

    mailer = ResendMailer("re_key", "Alerts <alerts@malainaadu.com>", client=mock_client(handler))

    reply = mailer.send(["a@b.c", "d@e.f"], "Subjek", "<p>isi</p>")

    assert reply == {"id": "email_1"}
    assert seen[0].headers["Authorization"] == "Bearer re_key"
    assert json.loads(seen[0].content) == {
        "from": "Alerts <alerts@malainaadu.com>",
        "to": ["a@b.c", "d@e.f"],
        "subject": "Subjek",
        "html": "<p>isi</p>",
    }


def test_mailer_provider_rejection():
    mailer = ResendMailer("bad", "a@b.c", client=mock_client(lambda request: httpx.Response(403, text="forbidden")))

    with pytest.raises(EmailError, match="Email provider error: 403 - forbidden"):
        mailer.send(["a@b.c"], "s", "h")


def test_mailer_needs_recipients():
    with pytest.raises(EmailError, match="No recipients"):
        ResendMailer("k", "a@b.c").send([], "s", "h")


def test_fetch_malformed_url_is_reported_not_raised():
    source = Source(id=2, name="Typo", rss_url="https://feeds/bad\n")

    result = FeedFetcher(client=mock_client(lambda request: httpx.Response(200))).fetch(source)

    assert result.success is False
    assert result.error.startswith("Invalid URL:")
