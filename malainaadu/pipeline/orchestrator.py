"""Ingestion orchestrator: fetch, dedup, rewrite and queue feed items."""

import logging
import time
from datetime import datetime
from typing import Callable, Dict, List, Optional

import psycopg
from psycopg import Connection
from pydantic import BaseModel, Field
from rich.console import Console
from rich.table import Table

from ..config import IngestionConfig
from ..db import ArticleStorage, CategoryManager, FetchLogManager, SourceManager
from ..ingestion import FeedFetcher, RawFeedItem, parse_rss
from ..models import ArticleStatus, Category, NewArticle, Source
from ..rewriting import ContentRewriter
from ..utils import normalize_publish_date, utcnow

console = Console()
logger = logging.getLogger(__name__)


class IngestionSummary(BaseModel):
    """Outcome of one ingestion run."""

    message: str
    processed: int = 0
    skipped: int = 0
    errors: List[str] = Field(default_factory=list)
    duration_ms: int = 0
    fetch_log_id: Optional[int] = None

    def to_response(self) -> dict:
        """Response body; `errors` only appears when there were any."""
        body = {
            "message": self.message,
            "processed": self.processed,
            "skipped": self.skipped,
            "duration_ms": self.duration_ms,
        }
        if self.errors:
            body["errors"] = self.errors
        return body


class SourceStats(BaseModel):
    """Per-source counters for the CLI summary."""

    name: str
    items: int = 0
    processed: int = 0
    skipped: int = 0
    error: Optional[str] = None


class IngestionOrchestrator:
    """
    Run one ingestion pass over every active source.

    Sources and items are handled sequentially. A source that cannot be
    fetched or an item that cannot be stored is recorded in the error list
    and the run continues. Anything else marks the fetch log failed and
    propagates.
    """

    def __init__(
        self,
        conn: Connection,
        rewriter: ContentRewriter,
        fetcher: Optional[FeedFetcher] = None,
        settings: Optional[IngestionConfig] = None,
        sources: Optional[SourceManager] = None,
        categories: Optional[CategoryManager] = None,
        articles: Optional[ArticleStorage] = None,
        fetch_logs: Optional[FetchLogManager] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.conn = conn
        self.rewriter = rewriter
        self.settings = settings or IngestionConfig()
        self.fetcher = fetcher or FeedFetcher(
            timeout=self.settings.feed_timeout,
            user_agent=self.settings.user_agent,
        )
        self.sources = sources or SourceManager()
        self.categories = categories or CategoryManager()
        self.articles = articles or ArticleStorage()
        self.fetch_logs = fetch_logs or FetchLogManager()
        self.sleep = sleep
        self.clock = clock
        self.source_stats: List[SourceStats] = []

    def run(self) -> IngestionSummary:
        """Execute one run and finalize its fetch log."""
        start = time.monotonic()
        self.source_stats = []
        log_id = self.fetch_logs.create_log(self.conn, started_at=self.clock())
        logger.info("Fetch run %s started", log_id)

        try:
            summary = self._execute()
        except Exception as e:
            logger.exception("Fetch run %s failed", log_id)
            self._fail_log(log_id, str(e) or e.__class__.__name__)
            raise

        summary.duration_ms = int((time.monotonic() - start) * 1000)
        summary.fetch_log_id = log_id
        self.fetch_logs.finalize_log(
            self.conn,
            log_id,
            "success",
            processed=summary.processed,
            skipped=summary.skipped,
            error_message="; ".join(summary.errors) if summary.errors else None,
            completed_at=self.clock(),
        )
        logger.info(
            "Fetch run %s completed in %dms: processed %d, skipped %d, errors %d",
            log_id,
            summary.duration_ms,
            summary.processed,
            summary.skipped,
            len(summary.errors),
        )
        return summary

    def _fail_log(self, log_id: int, message: str) -> None:
        try:
            # A failed statement leaves the transaction aborted
            self.conn.rollback()
            self.fetch_logs.finalize_log(self.conn, log_id, "failed", error_message=message, completed_at=self.clock())
        except psycopg.Error:
            logger.exception("Could not mark fetch run %s as failed", log_id)

    def _execute(self) -> IngestionSummary:
        sources = self.sources.get_active_sources(self.conn)
        logger.info("Found %d active sources", len(sources))
        if not sources:
            return IngestionSummary(message="No active sources found")

        categories = self.categories.get_categories(self.conn)
        by_slug = {c.slug: c for c in categories}

        summary = IngestionSummary(message="RSS fetch completed")
        for source in sources:
            stats = SourceStats(name=source.name)
            self.source_stats.append(stats)
            try:
                self._process_source(source, stats, by_slug, summary)
            except Exception as e:
                if isinstance(e, psycopg.Error):
                    self.conn.rollback()
                error = f"Error processing source {source.name}: {e}"
                logger.exception("Error processing source %s", source.name)
                stats.error = error
                summary.errors.append(error)
        return summary

    def _process_source(
        self,
        source: Source,
        stats: SourceStats,
        by_slug: Dict[str, Category],
        summary: IngestionSummary,
    ) -> None:
        logger.info("Fetching RSS from %s (%s)", source.name, source.rss_url)

        result = self.fetcher.fetch(source)
        if not result.success:
            error = f"Failed to fetch {source.name}: {result.error}"
            logger.error("%s", error)
            stats.error = error
            summary.errors.append(error)
            return

        items = []
        for item in parse_rss(result.text or ""):
            items.append(item)
            if len(items) >= self.settings.max_items_per_source:
                break
        stats.items = len(items)
        logger.info("Processing %d items from %s", len(items), source.name)

        for item in items:
            if self.articles.exists_by_original_url(self.conn, item.link):
                summary.skipped += 1
                stats.skipped += 1
                continue

            outcome = self._ingest_item(source, item, by_slug)
            if outcome == "inserted":
                summary.processed += 1
                stats.processed += 1
            elif outcome == "duplicate":
                summary.skipped += 1
                stats.skipped += 1
            else:
                summary.errors.append(outcome)

            self.sleep(self.settings.item_delay_seconds)

    def _ingest_item(self, source: Source, item: RawFeedItem, by_slug: Dict[str, Category]) -> str:
        """Rewrite and insert one item; returns "inserted", "duplicate" or an error message."""
        logger.debug("Processing article: %s", item.title[:50])
        rewritten = self.rewriter.rewrite(item.title, item.description, list(by_slug))

        category = by_slug.get(rewritten.category_slug) or by_slug.get(self.settings.default_category_slug)

        new_article = NewArticle(
            title=rewritten.title,
            original_title=item.title,
            content=rewritten.content,
            original_content=item.description,
            excerpt=rewritten.excerpt,
            image_url=item.image_url,
            source_id=source.id,
            category_id=category.id if category else None,
            original_url=item.link,
            feed_published_at=normalize_publish_date(item.pub_date, now=self.clock()),
            status=ArticleStatus.PENDING,
        )

        try:
            stored = self.articles.insert_article(self.conn, new_article)
        except psycopg.Error as e:
            self.conn.rollback()
            logger.error("Insert error for %s: %s", item.title[:50], e)
            return f"Insert failed: {item.title[:30]}..."

        if stored is None:
            logger.info("Article already stored by a concurrent run: %s", item.link)
            return "duplicate"

        logger.info("Inserted article %s: %s", stored.id, stored.title[:40])
        return "inserted"


def print_ingestion_summary(summary: IngestionSummary, source_stats: List[SourceStats]) -> None:
    """Print a per-source table and totals."""
    table = Table(title="Ingestion Summary")
    table.add_column("Source", style="cyan")
    table.add_column("Items", justify="right")
    table.add_column("New", justify="right", style="green")
    table.add_column("Skipped", justify="right", style="yellow")
    table.add_column("Error", style="red")

    for stats in source_stats:
        table.add_row(stats.name, str(stats.items), str(stats.processed), str(stats.skipped), stats.error or "")

    console.print(table)
    console.print(
        f"\n[bold]{summary.message}[/bold] in {summary.duration_ms}ms: "
        f"[green]{summary.processed}[/green] new, [yellow]{summary.skipped}[/yellow] skipped, "
        f"[red]{len(summary.errors)}[/red] errors"
    )
