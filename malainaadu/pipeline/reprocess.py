"""Re-paragraph stored articles whose body is a single block of text."""

import logging
import time
from typing import Callable, List, Optional

from psycopg import Connection
from pydantic import BaseModel, Field

from ..db import ArticleStorage
from ..rewriting import ContentRewriter

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
MAX_LIMIT = 100


def clamp_limit(limit: Optional[int]) -> int:
    """Batch size between 1 and MAX_LIMIT; missing or zero means the default."""
    if not limit:
        return DEFAULT_LIMIT
    return min(max(1, limit), MAX_LIMIT)


class ReprocessSummary(BaseModel):
    """Outcome of one reprocess batch."""

    message: str
    processed: int = 0
    total: int = 0
    errors: List[str] = Field(default_factory=list)

    def to_response(self) -> dict:
        body = {"message": self.message, "processed": self.processed, "total": self.total}
        if self.errors:
            body["errors"] = self.errors
        return body


class ArticleReprocessor:
    """Rewrite article bodies into paragraphs, one article at a time."""

    def __init__(
        self,
        conn: Connection,
        rewriter: ContentRewriter,
        articles: Optional[ArticleStorage] = None,
        delay_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.conn = conn
        self.rewriter = rewriter
        self.articles = articles or ArticleStorage()
        self.delay_seconds = delay_seconds
        self.sleep = sleep

    def run(self, limit: Optional[int] = DEFAULT_LIMIT) -> ReprocessSummary:
        """Reprocess up to `limit` articles lacking paragraph breaks."""
        batch = self.articles.get_unparagraphed(self.conn, clamp_limit(limit))
        logger.info("Found %d articles to reprocess", len(batch))
        if not batch:
            return ReprocessSummary(message="No articles need reprocessing")

        summary = ReprocessSummary(message="Reprocessing completed", total=len(batch))
        for article in batch:
            source_content = article.original_content or article.content
            try:
                result = self.rewriter.reprocess(article.title, source_content)
            except Exception as e:
                logger.warning("Reprocess failed for article %s: %s", article.id, e)
                summary.errors.append(f"Failed: {article.title[:30]}...")
            else:
                if self.articles.update_content(self.conn, article.id, result.content, result.excerpt):
                    summary.processed += 1
                else:
                    summary.errors.append(f"Update failed: {article.title[:30]}...")

            self.sleep(self.delay_seconds)

        logger.info("Reprocessed %d of %d articles", summary.processed, summary.total)
        return summary
