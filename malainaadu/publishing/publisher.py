"""Publish approved articles to Facebook through the webhook relay."""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from psycopg import Connection
from pydantic import BaseModel, Field

from ..alerts import ResendMailer, render_publish_failure
from ..config import SiteConfig
from ..db import AlertManager, ArticleStorage, FacebookLogManager
from ..errors import ArticleNotFoundError, EmailError, RelayError
from ..models import PublishableArticle
from ..utils import utcnow
from .payload import article_url, build_payload
from .relay import WebhookRelay

logger = logging.getLogger(__name__)

RELAY_NOT_CONFIGURED = "MAKE_WEBHOOK_URL not configured"


class PublishResult(BaseModel):
    """Outcome of one publish call."""

    article_id: int
    success: bool
    log_id: Optional[int] = None
    message: Optional[str] = None
    error: Optional[str] = None
    already_posted: bool = Field(False, description="Short-circuited by an earlier success")


class Publisher:
    """
    Post one article per call, at most one successful post per article.

    Every attempt gets a facebook_post_logs row. A call for an article that
    already has a 'success' row returns success without touching the relay.
    That check is read-then-write; two overlapping calls can both post, which
    leaves two success rows and is treated as a benign duplicate.
    """

    def __init__(
        self,
        conn: Connection,
        relay: Optional[WebhookRelay],
        site: Optional[SiteConfig] = None,
        mailer: Optional[ResendMailer] = None,
        articles: Optional[ArticleStorage] = None,
        post_logs: Optional[FacebookLogManager] = None,
        alerts: Optional[AlertManager] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.conn = conn
        self.relay = relay
        self.site = site or SiteConfig()
        self.mailer = mailer
        self.articles = articles or ArticleStorage()
        self.post_logs = post_logs or FacebookLogManager()
        self.alerts = alerts or AlertManager()
        self.clock = clock

    def publish(self, article_id: int) -> PublishResult:
        """
        Post one article.

        Raises:
            ArticleNotFoundError: when the article does not exist
        """
        article = self.articles.get_publishable(self.conn, article_id)
        if article is None:
            raise ArticleNotFoundError(article_id)

        existing = self.post_logs.get_success_log(self.conn, article_id)
        if existing is not None:
            logger.info("Article %s already posted successfully", article_id)
            return PublishResult(
                article_id=article_id,
                success=True,
                log_id=existing.id,
                message="Already posted",
                already_posted=True,
            )

        log_id = self.post_logs.create_log(self.conn, article_id)

        if self.relay is None:
            logger.error("%s", RELAY_NOT_CONFIGURED)
            self.post_logs.mark_failed(self.conn, log_id, RELAY_NOT_CONFIGURED)
            return PublishResult(article_id=article_id, success=False, log_id=log_id, error=RELAY_NOT_CONFIGURED)

        payload = build_payload(article, self.site.url, self.site.article_path, now=self.clock())

        try:
            response = self.relay.post(payload)
        except RelayError as e:
            error = f"Make.com webhook failed: {e}"
            self.post_logs.mark_failed(self.conn, log_id, error)
            self._notify_failure(article, error)
            return PublishResult(article_id=article_id, success=False, log_id=log_id, error=error)

        if response.ok:
            self.post_logs.mark_success(self.conn, log_id, response.data)
            self.articles.mark_posted_to_facebook(self.conn, article_id)
            logger.info("Article %s posted to Facebook", article_id)
            return PublishResult(article_id=article_id, success=True, log_id=log_id)

        error = f"Make.com webhook failed: {response.status_code} - {response.text}"
        logger.error("Publishing article %s failed: %s", article_id, error)
        self.post_logs.mark_failed(self.conn, log_id, error, response.data)
        self._notify_failure(article, error)
        return PublishResult(article_id=article_id, success=False, log_id=log_id, error=error)

    def publish_many(self, article_ids: List[int]) -> List[PublishResult]:
        """Bulk publish; one bad article does not stop the rest."""
        results = []
        for article_id in article_ids:
            try:
                results.append(self.publish(article_id))
            except ArticleNotFoundError as e:
                results.append(PublishResult(article_id=article_id, success=False, error=str(e)))
        return results

    def _notify_failure(self, article: PublishableArticle, error: str) -> None:
        """Best-effort alert; never masks the publish failure."""
        if self.mailer is None:
            logger.warning("Email provider not configured, skipping publish failure alert")
            return

        try:
            recipients = [s.email for s in self.alerts.get_error_subscribers(self.conn)]
            if not recipients:
                return
            url = article_url(self.site.url, article.slug, self.site.article_path)
            self.mailer.send(
                to=recipients,
                subject=f"⚠️ Facebook Post Failed - {article.title[:50]}...",
                html=render_publish_failure(
                    title=article.title,
                    error=error,
                    article_url=url,
                    admin_url=f"{self.site.url.rstrip('/')}/admin/facebook",
                    sent_at=self.clock(),
                ),
            )
            logger.info("Publish failure alert sent to %d admin(s)", len(recipients))
        except EmailError as e:
            logger.error("Failed to send publish failure alert: %s", e)
        except Exception:
            logger.exception("Unexpected error while sending publish failure alert")
