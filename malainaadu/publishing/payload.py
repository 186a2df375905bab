"""Outbound relay payload."""

from datetime import datetime
from typing import Any, Dict, Optional

from ..models import PublishableArticle
from ..utils import utcnow

RELAY_ACTION = "facebook_post"
DEFAULT_CATEGORY_NAME = "Berita"
DEFAULT_CATEGORY_SLUG = "berita"
DEFAULT_SOURCE_NAME = "Berita Malaysia"


def article_url(site_url: str, slug: str, article_path: str = "berita") -> str:
    """Canonical public URL of an article."""
    return f"{site_url.rstrip('/')}/{article_path.strip('/')}/{slug}"


def build_payload(
    article: PublishableArticle,
    site_url: str,
    article_path: str = "berita",
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Normalised body the relay turns into a Facebook post."""
    publish_date = article.publish_date or now or utcnow()
    return {
        "article_id": article.id,
        "title": article.title,
        "excerpt": article.excerpt or "",
        "image_url": article.image_url or "",
        "article_url": article_url(site_url, article.slug, article_path),
        "category": article.category_name or DEFAULT_CATEGORY_NAME,
        "category_slug": article.category_slug or DEFAULT_CATEGORY_SLUG,
        "publish_date": publish_date.isoformat(),
        "source_name": article.source_name or DEFAULT_SOURCE_NAME,
        "action": RELAY_ACTION,
    }
