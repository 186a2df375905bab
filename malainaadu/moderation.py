"""Moderation gate between the ingestion queue and the public site."""

import logging
from datetime import datetime
from typing import Callable, Optional

from psycopg import Connection
from pydantic import BaseModel

from .db import ArticleStorage
from .errors import ArticleNotFoundError, InvalidTransitionError
from .models import Article, ArticleStatus
from .publishing import PublishResult, Publisher
from .utils import utcnow

logger = logging.getLogger(__name__)

# Allowed source states for each target state
TRANSITIONS = {
    ArticleStatus.PUBLISHED: {ArticleStatus.DRAFT, ArticleStatus.PENDING, ArticleStatus.REJECTED},
    ArticleStatus.REJECTED: {ArticleStatus.DRAFT, ArticleStatus.PENDING, ArticleStatus.PUBLISHED},
}


class ModerationResult(BaseModel):
    """Article after a status change, plus the Facebook outcome if one was attempted."""

    article: Article
    facebook: Optional[PublishResult] = None


class ModerationService:
    """Approve or reject queued articles and count views."""

    def __init__(
        self,
        conn: Connection,
        publisher: Optional[Publisher] = None,
        articles: Optional[ArticleStorage] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.conn = conn
        self.publisher = publisher
        self.articles = articles or ArticleStorage()
        self.clock = clock

    def _load(self, article_id: int, target: ArticleStatus) -> Article:
        article = self.articles.get_article(self.conn, article_id)
        if article is None:
            raise ArticleNotFoundError(article_id)
        if article.status not in TRANSITIONS[target]:
            raise InvalidTransitionError(article_id, article.status.value, target.value)
        return article

    def publish(
        self,
        article_id: int,
        category_id: Optional[int] = None,
        post_to_facebook: bool = True,
    ) -> ModerationResult:
        """
        Make an article public.

        publish_date is kept when already set, otherwise it becomes now.
        A Facebook failure does not undo the status change.
        """
        article = self._load(article_id, ArticleStatus.PUBLISHED)
        publish_date = article.publish_date or self.clock()

        updated = self.articles.update_status(
            self.conn, article_id, ArticleStatus.PUBLISHED, publish_date, category_id
        )
        if updated is None:
            raise ArticleNotFoundError(article_id)
        logger.info("Article %s published", article_id)

        facebook = None
        if post_to_facebook and self.publisher is not None:
            facebook = self.publisher.publish(article_id)
            if not facebook.success:
                logger.warning("Article %s published but Facebook post failed: %s", article_id, facebook.error)

        return ModerationResult(article=updated, facebook=facebook)

    def reject(self, article_id: int) -> ModerationResult:
        """Take an article out of the queue; it no longer has a publish date."""
        self._load(article_id, ArticleStatus.REJECTED)

        updated = self.articles.update_status(self.conn, article_id, ArticleStatus.REJECTED, None)
        if updated is None:
            raise ArticleNotFoundError(article_id)
        logger.info("Article %s rejected", article_id)
        return ModerationResult(article=updated)

    def record_view(
        self,
        article_id: int,
        ip_hash: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> int:
        """Record a view and return the new count."""
        count = self.articles.record_view(self.conn, article_id, ip_hash, user_agent)
        if count is None:
            raise ArticleNotFoundError(article_id)
        return count
