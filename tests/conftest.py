"""Shared fixtures."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest

from malainaadu.rewriting import ContentRewriter, MockLLMProvider

from tests.fakes import (
    FIXED_NOW,
    FakeAlertManager,
    FakeArticleStorage,
    FakeCategoryManager,
    FakeFacebookLogManager,
    FakeFetchLogManager,
    FakeSourceManager,
    Store,
)

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def clock(now):
    return lambda: now


@pytest.fixture
def conn():
    """Stand-in connection; the fake managers never touch it."""
    return MagicMock(name="conn")


@pytest.fixture
def store(now):
    store = Store(now)
    store.add_category("Nasional", "nasional")
    store.add_category("Sukan", "sukan")
    return store


@pytest.fixture
def sources(store):
    return FakeSourceManager(store)


@pytest.fixture
def categories(store):
    return FakeCategoryManager(store)


@pytest.fixture
def articles(store):
    return FakeArticleStorage(store)


@pytest.fixture
def fetch_logs(store):
    return FakeFetchLogManager(store)


@pytest.fixture
def post_logs(store):
    return FakeFacebookLogManager(store)


@pytest.fixture
def alerts(store):
    return FakeAlertManager(store)


@pytest.fixture
def sample_feed():
    return (FIXTURES / "sample_feed.xml").read_text(encoding="utf-8")


@pytest.fixture
def rewrite_reply():
    return json.dumps(
        {
            "title": "பிரதமர் புதிய கொள்கை அறிவிப்பு",
            "content": "முதல் பத்தி.\n\nஇரண்டாவது பத்தி.",
            "excerpt": "சுருக்கம்",
            "category": "sukan",
        },
        ensure_ascii=False,
    )


@pytest.fixture
def rewriter(rewrite_reply):
    return ContentRewriter(MockLLMProvider(replies=[rewrite_reply]))


def mock_client(handler) -> httpx.Client:
    """httpx client whose requests are answered by `handler`."""
    return httpx.Client(transport=httpx.MockTransport(handler))
