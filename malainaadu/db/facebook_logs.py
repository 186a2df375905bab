"""Facebook publish attempt logs."""

from typing import Any, Dict, Optional

from psycopg import Connection
from psycopg.types.json import Jsonb

from ..models import FacebookPostLog


class FacebookLogManager:
    """Track per-article publish attempts."""

    def get_success_log(self, conn: Connection, article_id: int) -> Optional[FacebookPostLog]:
        """First successful attempt for an article, if any."""
        with conn.cursor() as cur:
            cur.execute(
                """
                SELECT * FROM facebook_post_logs
                WHERE article_id = %s AND status = 'success'
                ORDER BY created_at
                LIMIT 1
                """,
                (article_id,),
            )
            row = cur.fetchone()
            return FacebookPostLog(**row) if row else None

    def create_log(self, conn: Connection, article_id: int) -> int:
        """Insert a 'pending' attempt and return its ID."""
        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO facebook_post_logs (article_id, status)
                VALUES (%s, 'pending')
                RETURNING id
                """,
                (article_id,),
            )
            log_id = cur.fetchone()["id"]
        conn.commit()
        return log_id

    def mark_success(self, conn: Connection, log_id: int, response_data: Dict[str, Any]) -> None:
        """Record a relay success."""
        with conn.cursor() as cur:
            cur.execute(
                """
                UPDATE facebook_post_logs
                SET status = 'success', response_data = %s, error_message = NULL
                WHERE id = %s
                """,
                (Jsonb(response_data), log_id),
            )
        conn.commit()

    def mark_failed(
        self,
        conn: Connection,
        log_id: int,
        error_message: str,
        response_data: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Record a failed attempt."""
        with conn.cursor() as cur:
            cur.execute(
                """
                UPDATE facebook_post_logs
                SET status = 'failed', error_message = %s, response_data = %s
                WHERE id = %s
                """,
                (error_message, Jsonb(response_data) if response_data is not None else None, log_id),
            )
        conn.commit()
