"""Article models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .base import DBModel


class ArticleStatus(str, Enum):
    """Moderation status of an article."""

    DRAFT = "draft"
    PENDING = "pending"
    PUBLISHED = "published"
    REJECTED = "rejected"


class Article(DBModel):
    """Article stored in the portal."""

    slug: str = Field(..., description="Unique URL slug, stable once assigned")
    title: str = Field(..., description="Published (rewritten) title")
    original_title: Optional[str] = Field(None, description="Title as it appeared in the feed")
    content: str = Field(..., description="Body, paragraphs separated by blank lines")
    original_content: Optional[str] = Field(None, description="Feed description")
    excerpt: Optional[str] = Field(None, description="Short summary")
    image_url: Optional[str] = Field(None, description="Lead image")
    source_id: Optional[int] = Field(None, description="Foreign key to sources table")
    category_id: Optional[int] = Field(None, description="Foreign key to categories table")
    original_url: Optional[str] = Field(None, description="Feed link, the dedup key")
    feed_published_at: Optional[datetime] = Field(None, description="Normalised feed date")
    status: ArticleStatus = Field(ArticleStatus.PENDING, description="Moderation status")
    view_count: int = Field(0, description="Recorded views", ge=0)
    publish_date: Optional[datetime] = Field(None, description="Set when published")
    is_featured: bool = Field(False)
    is_breaking: bool = Field(False)
    posted_to_facebook: bool = Field(False, description="Confirmed Facebook post")


class NewArticle(BaseModel):
    """Values for an article insert."""

    title: str
    content: str
    original_title: Optional[str] = None
    original_content: Optional[str] = None
    excerpt: Optional[str] = None
    image_url: Optional[str] = None
    source_id: Optional[int] = None
    category_id: Optional[int] = None
    original_url: Optional[str] = None
    feed_published_at: Optional[datetime] = None
    status: ArticleStatus = ArticleStatus.PENDING
    publish_date: Optional[datetime] = None
    is_featured: bool = False
    is_breaking: bool = False


class PublishableArticle(BaseModel):
    """Article joined with the source and category names the relay needs."""

    id: int
    title: str
    slug: str
    excerpt: Optional[str] = None
    image_url: Optional[str] = None
    publish_date: Optional[datetime] = None
    source_name: Optional[str] = None
    category_name: Optional[str] = None
    category_slug: Optional[str] = None
