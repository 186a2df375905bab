"""Article storage and management."""

from datetime import datetime
from typing import List, Optional

from psycopg import Connection

from ..models import Article, ArticleStatus, NewArticle, PublishableArticle
from ..utils import make_slug

PARAGRAPH_BREAK = "\n\n"


class ArticleStorage:
    """Handle article storage and deduplication."""

    def exists_by_original_url(self, conn: Connection, original_url: str) -> bool:
        """Whether an article with this feed link was already stored."""
        with conn.cursor() as cur:
            cur.execute(
                "SELECT 1 FROM articles WHERE original_url = %s LIMIT 1",
                (original_url,),
            )
            return cur.fetchone() is not None

    def insert_article(self, conn: Connection, article: NewArticle) -> Optional[Article]:
        """
        Insert an article.

        The unique index on original_url is the dedup guard; a concurrent run
        that stored the same link first makes this return None.

        Returns:
            The stored article, or None when original_url already exists
        """
        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO articles (
                    slug, title, original_title, content, original_content,
                    excerpt, image_url, source_id, category_id, original_url,
                    feed_published_at, status, view_count, publish_date,
                    is_featured, is_breaking, posted_to_facebook
                ) VALUES (
                    %s, %s, %s, %s, %s, %s, %s, %s, %s, %s,
                    %s, %s, 0, %s, %s, %s, FALSE
                )
                ON CONFLICT (original_url) DO NOTHING
                RETURNING *
                """,
                (
                    make_slug(article.original_title or article.title),
                    article.title,
                    article.original_title,
                    article.content,
                    article.original_content,
                    article.excerpt,
                    article.image_url,
                    article.source_id,
                    article.category_id,
                    article.original_url,
                    article.feed_published_at,
                    article.status.value,
                    article.publish_date,
                    article.is_featured,
                    article.is_breaking,
                ),
            )
            row = cur.fetchone()
        conn.commit()
        return Article(**row) if row else None

    def get_article(self, conn: Connection, article_id: int) -> Optional[Article]:
        """Get article by ID."""
        with conn.cursor() as cur:
            cur.execute("SELECT * FROM articles WHERE id = %s", (article_id,))
            row = cur.fetchone()
            return Article(**row) if row else None

    def get_publishable(self, conn: Connection, article_id: int) -> Optional[PublishableArticle]:
        """Article with the source and category names used in the relay payload."""
        with conn.cursor() as cur:
            cur.execute(
                """
                SELECT
                    a.id, a.title, a.slug, a.excerpt, a.image_url, a.publish_date,
                    s.name AS source_name,
                    c.name AS category_name,
                    c.slug AS category_slug
                FROM articles a
                LEFT JOIN sources s ON a.source_id = s.id
                LEFT JOIN categories c ON a.category_id = c.id
                WHERE a.id = %s
                """,
                (article_id,),
            )
            row = cur.fetchone()
            return PublishableArticle(**row) if row else None

    def update_status(
        self,
        conn: Connection,
        article_id: int,
        status: ArticleStatus,
        publish_date: Optional[datetime],
        category_id: Optional[int] = None,
    ) -> Optional[Article]:
        """Set status and publish date; category only changes when given."""
        with conn.cursor() as cur:
            cur.execute(
                """
                UPDATE articles
                SET
                    status = %s,
                    publish_date = %s,
                    category_id = COALESCE(%s, category_id)
                WHERE id = %s
                RETURNING *
                """,
                (status.value, publish_date, category_id, article_id),
            )
            row = cur.fetchone()
        conn.commit()
        return Article(**row) if row else None

    def mark_posted_to_facebook(self, conn: Connection, article_id: int) -> None:
        """Flag an article as posted after a confirmed relay success."""
        with conn.cursor() as cur:
            cur.execute(
                "UPDATE articles SET posted_to_facebook = TRUE WHERE id = %s",
                (article_id,),
            )
        conn.commit()

    def count_created_since(self, conn: Connection, since: datetime) -> int:
        """Number of articles created at or after `since`."""
        with conn.cursor() as cur:
            cur.execute(
                "SELECT COUNT(*) AS total FROM articles WHERE created_at >= %s",
                (since,),
            )
            return cur.fetchone()["total"]

    def get_unparagraphed(self, conn: Connection, limit: int) -> List[Article]:
        """Articles whose body has no paragraph break."""
        with conn.cursor() as cur:
            cur.execute(
                """
                SELECT * FROM articles
                WHERE position(%s in content) = 0
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (PARAGRAPH_BREAK, limit),
            )
            return [Article(**row) for row in cur.fetchall()]

    def update_content(
        self,
        conn: Connection,
        article_id: int,
        content: str,
        excerpt: Optional[str],
    ) -> bool:
        """Replace body and excerpt."""
        with conn.cursor() as cur:
            cur.execute(
                "UPDATE articles SET content = %s, excerpt = %s WHERE id = %s",
                (content, excerpt, article_id),
            )
            updated = cur.rowcount > 0
        conn.commit()
        return updated

    def record_view(
        self,
        conn: Connection,
        article_id: int,
        ip_hash: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[int]:
        """
        Record one view.

        Returns:
            The new view count, or None when the article does not exist
        """
        with conn.cursor() as cur:
            cur.execute(
                """
                UPDATE articles
                SET view_count = view_count + 1
                WHERE id = %s
                RETURNING view_count
                """,
                (article_id,),
            )
            row = cur.fetchone()
            if row is None:
                conn.rollback()
                return None
            cur.execute(
                "INSERT INTO article_views (article_id, ip_hash, user_agent) VALUES (%s, %s, %s)",
                (article_id, ip_hash, user_agent),
            )
        conn.commit()
        return row["view_count"]
