"""In-memory stand-ins for the database managers."""

from datetime import datetime, timezone
from itertools import count
from typing import Any, Dict, List, Optional, Set

import psycopg

from malainaadu.db.articles import PARAGRAPH_BREAK
from malainaadu.models import (
    Article,
    ArticleStatus,
    Category,
    EmailAlertSubscription,
    FacebookPostLog,
    FetchLog,
    NewArticle,
    PublishableArticle,
    Source,
)
from malainaadu.utils import make_slug

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class Store:
    """Rows shared by the fake managers."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now
        self.ids = count(1)
        self.sources: Dict[int, Source] = {}
        self.categories: Dict[int, Category] = {}
        self.articles: Dict[int, Article] = {}
        self.views: List[Dict[str, Any]] = []
        self.fetch_logs: Dict[int, FetchLog] = {}
        self.post_logs: Dict[int, FacebookPostLog] = {}
        self.subscriptions: Dict[int, EmailAlertSubscription] = {}
        self.alert_logs: List[Dict[str, Any]] = []

    def add_source(self, name: str, rss_url: str, is_active: bool = True) -> Source:
        source = Source(id=next(self.ids), name=name, rss_url=rss_url, is_active=is_active)
        self.sources[source.id] = source
        return source

    def add_category(self, name: str, slug: str) -> Category:
        category = Category(id=next(self.ids), name=name, slug=slug)
        self.categories[category.id] = category
        return category

    def add_article(self, **values: Any) -> Article:
        values.setdefault("title", "Tajuk")
        values.setdefault("content", "Kandungan")
        values.setdefault("slug", make_slug(values["title"]))
        values.setdefault("created_at", self.now)
        article = Article(id=next(self.ids), **values)
        self.articles[article.id] = article
        return article

    def add_subscription(self, email: str, **values: Any) -> EmailAlertSubscription:
        sub_id = next(self.ids)
        subscription = EmailAlertSubscription(id=sub_id, user_id=f"user-{sub_id}", email=email, **values)
        self.subscriptions[sub_id] = subscription
        return subscription


class FakeSourceManager:
    def __init__(self, store: Store) -> None:
        self.store = store

    def get_sources(self, conn) -> List[Source]:
        return sorted(self.store.sources.values(), key=lambda s: s.name)

    def get_active_sources(self, conn) -> List[Source]:
        return [s for s in self.get_sources(conn) if s.is_active]


class FakeCategoryManager:
    def __init__(self, store: Store) -> None:
        self.store = store

    def get_categories(self, conn) -> List[Category]:
        return sorted(self.store.categories.values(), key=lambda c: c.name)

    def get_by_slug(self, conn, slug: str) -> Optional[Category]:
        return next((c for c in self.store.categories.values() if c.slug == slug), None)


class FakeArticleStorage:
    def __init__(self, store: Store) -> None:
        self.store = store
        self.failing_urls: Set[str] = set()
        self.race_urls: Set[str] = set()

    def exists_by_original_url(self, conn, original_url: str) -> bool:
        return any(a.original_url == original_url for a in self.store.articles.values())

    def insert_article(self, conn, article: NewArticle) -> Optional[Article]:
        if article.original_url in self.failing_urls:
            raise psycopg.errors.CheckViolation("violates check constraint")
        if article.original_url in self.race_urls:
            return None
        if article.original_url and self.exists_by_original_url(conn, article.original_url):
            return None
        values = article.model_dump()
        values["slug"] = make_slug(article.original_title or article.title)
        return self.store.add_article(**values)

    def get_article(self, conn, article_id: int) -> Optional[Article]:
        return self.store.articles.get(article_id)

    def get_publishable(self, conn, article_id: int) -> Optional[PublishableArticle]:
        article = self.store.articles.get(article_id)
        if article is None:
            return None
        source = self.store.sources.get(article.source_id) if article.source_id else None
        category = self.store.categories.get(article.category_id) if article.category_id else None
        return PublishableArticle(
            id=article.id,
            title=article.title,
            slug=article.slug,
            excerpt=article.excerpt,
            image_url=article.image_url,
            publish_date=article.publish_date,
            source_name=source.name if source else None,
            category_name=category.name if category else None,
            category_slug=category.slug if category else None,
        )

    def update_status(
        self,
        conn,
        article_id: int,
        status: ArticleStatus,
        publish_date: Optional[datetime],
        category_id: Optional[int] = None,
    ) -> Optional[Article]:
        article = self.store.articles.get(article_id)
        if article is None:
            return None
        updated = article.model_copy(
            update={
                "status": status,
                "publish_date": publish_date,
                "category_id": category_id if category_id is not None else article.category_id,
            }
        )
        self.store.articles[article_id] = updated
        return updated

    def mark_posted_to_facebook(self, conn, article_id: int) -> None:
        article = self.store.articles[article_id]
        self.store.articles[article_id] = article.model_copy(update={"posted_to_facebook": True})

    def count_created_since(self, conn, since: datetime) -> int:
        return sum(1 for a in self.store.articles.values() if a.created_at and a.created_at >= since)

    def get_unparagraphed(self, conn, limit: int) -> List[Article]:
        rows = [a for a in self.store.articles.values() if PARAGRAPH_BREAK not in a.content]
        return rows[:limit]

    def update_content(self, conn, article_id: int, content: str, excerpt: Optional[str]) -> bool:
        article = self.store.articles.get(article_id)
        if article is None:
            return False
        self.store.articles[article_id] = article.model_copy(update={"content": content, "excerpt": excerpt})
        return True

    def record_view(self, conn, article_id: int, ip_hash=None, user_agent=None) -> Optional[int]:
        article = self.store.articles.get(article_id)
        if article is None:
            return None
        new_count = article.view_count + 1
        self.store.articles[article_id] = article.model_copy(update={"view_count": new_count})
        self.store.views.append({"article_id": article_id, "ip_hash": ip_hash, "user_agent": user_agent})
        return new_count


class FakeFetchLogManager:
    def __init__(self, store: Store) -> None:
        self.store = store

    def create_log(self, conn, started_at: Optional[datetime] = None) -> int:
        log_id = next(self.store.ids)
        self.store.fetch_logs[log_id] = FetchLog(id=log_id, started_at=started_at or self.store.now)
        return log_id

    def finalize_log(
        self,
        conn,
        log_id: int,
        status: str,
        processed: int = 0,
        skipped: int = 0,
        error_message: Optional[str] = None,
        completed_at: Optional[datetime] = None,
    ) -> None:
        self.store.fetch_logs[log_id] = self.store.fetch_logs[log_id].model_copy(
            update={
                "status": status,
                "articles_processed": processed,
                "articles_skipped": skipped,
                "error_message": error_message,
                "completed_at": completed_at or self.store.now,
            }
        )

    def get_latest(self, conn) -> Optional[FetchLog]:
        logs = sorted(self.store.fetch_logs.values(), key=lambda log: log.started_at)
        return logs[-1] if logs else None


class FakeFacebookLogManager:
    def __init__(self, store: Store) -> None:
        self.store = store

    def get_success_log(self, conn, article_id: int) -> Optional[FacebookPostLog]:
        return next(
            (
                log
                for log in self.store.post_logs.values()
                if log.article_id == article_id and log.status == "success"
            ),
            None,
        )

    def create_log(self, conn, article_id: int) -> int:
        log_id = next(self.store.ids)
        self.store.post_logs[log_id] = FacebookPostLog(id=log_id, article_id=article_id)
        return log_id

    def mark_success(self, conn, log_id: int, response_data: Dict[str, Any]) -> None:
        self.store.post_logs[log_id] = self.store.post_logs[log_id].model_copy(
            update={"status": "success", "response_data": response_data}
        )

    def mark_failed(self, conn, log_id: int, error_message: str, response_data=None) -> None:
        self.store.post_logs[log_id] = self.store.post_logs[log_id].model_copy(
            update={"status": "failed", "error_message": error_message, "response_data": response_data}
        )


class FakeAlertManager:
    def __init__(self, store: Store) -> None:
        self.store = store

    def get_error_subscribers(self, conn) -> List[EmailAlertSubscription]:
        return [s for s in self.store.subscriptions.values() if s.processing_errors]

    def mark_alert_sent(self, conn, subscription_id: int, sent_at: datetime) -> None:
        subscription = self.store.subscriptions[subscription_id]
        self.store.subscriptions[subscription_id] = subscription.model_copy(update={"last_alert_sent": sent_at})

    def log_alert(self, conn, alert_type: str, message: str, recipients: List[str]) -> int:
        self.store.alert_logs.append({"alert_type": alert_type, "message": message, "recipients": recipients})
        return len(self.store.alert_logs)
