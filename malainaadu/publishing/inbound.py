"""Articles pushed in by an external publishing workflow."""

import logging
from datetime import datetime
from typing import Callable, Optional

from psycopg import Connection
from pydantic import BaseModel

from ..config import SiteConfig
from ..db import ArticleStorage, CategoryManager
from ..errors import InvalidPayloadError
from ..models import Article, ArticleStatus, NewArticle
from ..utils import parse_datetime, utcnow
from .payload import article_url

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 500
MAX_CONTENT_LENGTH = 100_000


class InboundArticle(BaseModel):
    """Body of an inbound publish request. Only title and content are required."""

    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    image_url: Optional[str] = None
    category_slug: Optional[str] = None
    publish_date: Optional[str] = None
    original_url: Optional[str] = None
    original_title: Optional[str] = None
    original_content: Optional[str] = None
    is_featured: bool = False
    is_breaking: bool = False


def validate_inbound(payload: InboundArticle) -> None:
    """Raise InvalidPayloadError for a missing or oversized title or body."""
    if not payload.title or not payload.title.strip():
        raise InvalidPayloadError("Title is required")
    if not payload.content or not payload.content.strip():
        raise InvalidPayloadError("Content is required")
    if len(payload.title) > MAX_TITLE_LENGTH:
        raise InvalidPayloadError(f"Title must be less than {MAX_TITLE_LENGTH} characters")
    if len(payload.content) > MAX_CONTENT_LENGTH:
        raise InvalidPayloadError(f"Content must be less than {MAX_CONTENT_LENGTH:,} characters")


class InboundPublisher:
    """Insert externally authored articles straight into the published state."""

    def __init__(
        self,
        conn: Connection,
        site: Optional[SiteConfig] = None,
        articles: Optional[ArticleStorage] = None,
        categories: Optional[CategoryManager] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.conn = conn
        self.site = site or SiteConfig()
        self.articles = articles or ArticleStorage()
        self.categories = categories or CategoryManager()
        self.clock = clock

    def create(self, payload: InboundArticle) -> Article:
        """
        Validate and store one article.

        An unknown category slug is logged and the article stays uncategorised.

        Raises:
            InvalidPayloadError: on validation failure, a bad publish_date or a
                duplicate original_url
        """
        validate_inbound(payload)

        category_id = None
        if payload.category_slug:
            category = self.categories.get_by_slug(self.conn, payload.category_slug)
            if category is None:
                logger.warning("Category not found for slug: %s", payload.category_slug)
            else:
                category_id = category.id

        if payload.publish_date:
            publish_date = parse_datetime(payload.publish_date)
            if publish_date is None:
                raise InvalidPayloadError("Invalid publish_date format")
        else:
            publish_date = self.clock()

        stored = self.articles.insert_article(
            self.conn,
            NewArticle(
                title=payload.title.strip(),
                content=payload.content.strip(),
                excerpt=(payload.excerpt or "").strip() or None,
                image_url=payload.image_url or None,
                category_id=category_id,
                original_url=payload.original_url or None,
                original_title=payload.original_title or None,
                original_content=payload.original_content or None,
                is_featured=payload.is_featured,
                is_breaking=payload.is_breaking,
                status=ArticleStatus.PUBLISHED,
                publish_date=publish_date,
            ),
        )
        if stored is None:
            raise InvalidPayloadError("An article with this original_url already exists")

        logger.info("Article created successfully: %s (%s)", stored.id, stored.slug)
        return stored

    def url_for(self, article: Article) -> str:
        return article_url(self.site.url, article.slug, self.site.article_path)
