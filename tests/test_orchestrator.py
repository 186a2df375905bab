"""Tests for the ingestion orchestrator."""

from datetime import datetime, timezone

import httpx
import pytest

from malainaadu.config import IngestionConfig
from malainaadu.errors import RewriteError
from malainaadu.ingestion import FeedFetcher
from malainaadu.models import ArticleStatus
from malainaadu.pipeline import IngestionOrchestrator
from malainaadu.rewriting import ContentRewriter, MockLLMProvider

from tests.conftest import mock_client

ONE_ITEM_FEED = """<rss><channel>
<item><title>PM Announces Policy</title><link>https://src/a1</link>
<description>Policy details</description><pubDate>Sat, 01 Jun 2024 08:30:00 GMT</pubDate></item>
</channel></rss>"""


def feeds_client(feeds):
    """Serve feed bodies by URL; unknown URLs get 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = feeds.get(str(request.url))
        if body is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, text=body)

    return mock_client(handler)


@pytest.fixture
def make_orchestrator(conn, sources, categories, articles, fetch_logs, clock):
    sleeps = []

    def build(feeds, rewriter, settings=None):
        orchestrator = IngestionOrchestrator(
            conn,
            rewriter,
            fetcher=FeedFetcher(client=feeds_client(feeds)),
            settings=settings or IngestionConfig(),
            sources=sources,
            categories=categories,
            articles=articles,
            fetch_logs=fetch_logs,
            sleep=sleeps.append,
            clock=clock,
        )
        orchestrator.sleeps = sleeps
        return orchestrator

    return build


def test_second_run_on_unchanged_feed_skips_everything(store, make_orchestrator, rewriter):
    store.add_source("Src", "https://feeds/one")
    orchestrator = make_orchestrator({"https://feeds/one": ONE_ITEM_FEED}, rewriter)

    first = orchestrator.run()
    second = orchestrator.run()

    assert (first.processed, first.skipped) == (1, 0)
    assert (second.processed, second.skipped) == (0, 1)
    assert len(store.articles) == 1
    article = next(iter(store.articles.values()))
    assert article.original_url == "https://src/a1"
    assert article.original_title == "PM Announces Policy"
    assert article.status == ArticleStatus.PENDING
    assert article.publish_date is None
    assert article.feed_published_at == datetime(2024, 6, 1, 8, 30, tzinfo=timezone.utc)


def test_fetch_log_is_finalized_with_counts(store, make_orchestrator, rewriter):
    store.add_source("Src", "https://feeds/one")

    summary = make_orchestrator({"https://feeds/one": ONE_ITEM_FEED}, rewriter).run()

    log = store.fetch_logs[summary.fetch_log_id]
    assert log.status == "success"
    assert log.articles_processed == 1
    assert log.articles_skipped == 0
    assert log.error_message is None
    assert log.completed_at is not None


def test_rewriter_failure_still_queues_original_text(store, make_orchestrator):
    store.add_source("Src", "https://feeds/one")
    failing = ContentRewriter(MockLLMProvider(error=RewriteError("Gemini API error: 500")))

    summary = make_orchestrator({"https://feeds/one": ONE_ITEM_FEED}, failing).run()

    assert summary.processed == 1
    article = next(iter(store.articles.values()))
    assert article.title == "PM Announces Policy"
    assert article.content == "Policy details"
    assert article.status == ArticleStatus.PENDING
    nasional = next(c for c in store.categories.values() if c.slug == "nasional")
    assert article.category_id == nasional.id


def test_model_category_is_resolved(store, make_orchestrator, rewriter):
    store.add_source("Src", "https://feeds/one")

    make_orchestrator({"https://feeds/one": ONE_ITEM_FEED}, rewriter).run()

    sukan = next(c for c in store.categories.values() if c.slug == "sukan")
    assert next(iter(store.articles.values())).category_id == sukan.id


def test_unknown_category_slug_uses_default(store, make_orchestrator):
    store.add_source("Src", "https://feeds/one")
    rewriter = ContentRewriter(MockLLMProvider(replies=['{"title": "T", "category": "cuaca"}']))

    make_orchestrator({"https://feeds/one": ONE_ITEM_FEED}, rewriter).run()

    nasional = next(c for c in store.categories.values() if c.slug == "nasional")
    assert next(iter(store.articles.values())).category_id == nasional.id


def test_failed_source_is_reported_and_others_continue(store, make_orchestrator, rewriter):
    store.add_source("Broken", "https://feeds/missing")
    store.add_source("Good", "https://feeds/one")

    summary = make_orchestrator({"https://feeds/one": ONE_ITEM_FEED}, rewriter).run()

    assert summary.processed == 1
    assert summary.errors == ["Failed to fetch Broken: 404"]
    assert store.fetch_logs[summary.fetch_log_id].error_message == "Failed to fetch Broken: 404"
    assert summary.to_response()["errors"] == ["Failed to fetch Broken: 404"]


def test_items_per_source_are_capped(store, make_orchestrator, rewriter, sample_feed):
    store.add_source("Src", "https://feeds/sample")
    settings = IngestionConfig(max_items_per_source=2)

    orchestrator = make_orchestrator({"https://feeds/sample": sample_feed}, rewriter, settings)
    summary = orchestrator.run()

    assert summary.processed == 2
    assert {a.original_url for a in store.articles.values()} == {"https://src/a1", "https://src/a2"}
    assert orchestrator.sleeps == [0.3, 0.3]


def test_unparsable_pub_date_becomes_now(store, make_orchestrator, rewriter, sample_feed, now):
    store.add_source("Src", "https://feeds/sample")

    make_orchestrator({"https://feeds/sample": sample_feed}, rewriter).run()

    by_url = {a.original_url: a for a in store.articles.values()}
    assert by_url["https://src/a2"].feed_published_at == now


def test_insert_error_is_recorded_and_run_continues(store, articles, make_orchestrator, rewriter, sample_feed, conn):
    store.add_source("Src", "https://feeds/sample")
    articles.failing_urls.add("https://src/a1")

    summary = make_orchestrator({"https://feeds/sample": sample_feed}, rewriter).run()

    assert summary.processed == 2
    assert summary.errors == ["Insert failed: PM Announces Policy..."]
    conn.rollback.assert_called()


def test_lost_insert_race_counts_as_skip(store, articles, make_orchestrator, rewriter):
    store.add_source("Src", "https://feeds/one")
    articles.race_urls.add("https://src/a1")

    summary = make_orchestrator({"https://feeds/one": ONE_ITEM_FEED}, rewriter).run()

    assert (summary.processed, summary.skipped) == (0, 1)
    assert summary.errors == []


def test_no_active_sources(store, make_orchestrator, rewriter):
    store.add_source("Off", "https://feeds/off", is_active=False)

    summary = make_orchestrator({}, rewriter).run()

    assert summary.message == "No active sources found"
    assert summary.processed == 0
    assert store.fetch_logs[summary.fetch_log_id].status == "success"


def test_unexpected_error_marks_fetch_log_failed(store, sources, make_orchestrator, rewriter, monkeypatch):
    store.add_source("Src", "https://feeds/one")

    def explode(conn):
        raise RuntimeError("database went away")

    monkeypatch.setattr(sources, "get_active_sources", explode)

    with pytest.raises(RuntimeError):
        make_orchestrator({}, rewriter).run()

    (log,) = store.fetch_logs.values()
    assert log.status == "failed"
    assert log.error_message == "database went away"


def test_malformed_source_url_does_not_abort_run(store, make_orchestrator, rewriter):
    store.add_source("Typo", "https://feeds/bad\n")
    store.add_source("Good", "https://feeds/one")

    summary = make_orchestrator({"https://feeds/one": ONE_ITEM_FEED}, rewriter).run()

    assert summary.processed == 1
    (error,) = summary.errors
    assert error.startswith("Failed to fetch Typo: Invalid URL:")
    assert store.fetch_logs[summary.fetch_log_id].status == "success"


def test_unexpected_source_error_is_isolated(store, articles, make_orchestrator, rewriter, monkeypatch):
    store.add_source("Alpha", "https://feeds/alpha")
    store.add_source("Beta", "https://feeds/one")
    other_feed = ONE_ITEM_FEED.replace("https://src/a1", "https://src/alpha")
    exists = articles.exists_by_original_url

    def flaky_exists(conn, original_url):
        if original_url == "https://src/alpha":
            raise RuntimeError("lookup exploded")
        return exists(conn, original_url)

    monkeypatch.setattr(articles, "exists_by_original_url", flaky_exists)
    orchestrator = make_orchestrator({"https://feeds/alpha": other_feed, "https://feeds/one": ONE_ITEM_FEED}, rewriter)

    summary = orchestrator.run()

    assert summary.processed == 1
    assert summary.errors == ["Error processing source Alpha: lookup exploded"]
    assert orchestrator.source_stats[0].error == "Error processing source Alpha: lookup exploded"
    assert orchestrator.source_stats[1].processed == 1
    log = store.fetch_logs[summary.fetch_log_id]
    assert log.status == "success"
    assert log.error_message == "Error processing source Alpha: lookup exploded"
