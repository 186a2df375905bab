"""Fetch log management in database."""

from datetime import datetime
from typing import Optional

from psycopg import Connection

from ..models import FetchLog
from ..utils import utcnow


class FetchLogManager:
    """Manage ingestion run logs in database."""

    def create_log(
        self,
        conn: Connection,
        started_at: Optional[datetime] = None,
    ) -> int:
        """
        Create a new run record in 'running' status.

        Returns:
            Fetch log ID
        """
        if started_at is None:
            started_at = utcnow()

        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO fetch_logs (started_at, status)
                VALUES (%s, 'running')
                RETURNING id
                """,
                (started_at,),
            )
            log_id = cur.fetchone()["id"]

        conn.commit()
        return log_id

    def finalize_log(
        self,
        conn: Connection,
        log_id: int,
        status: str,
        processed: int = 0,
        skipped: int = 0,
        error_message: Optional[str] = None,
        completed_at: Optional[datetime] = None,
    ) -> None:
        """Record the outcome of a run."""
        if completed_at is None:
            completed_at = utcnow()

        with conn.cursor() as cur:
            cur.execute(
                """
                UPDATE fetch_logs
                SET
                    status = %s,
                    completed_at = %s,
                    articles_processed = %s,
                    articles_skipped = %s,
                    error_message = %s
                WHERE id = %s
                """,
                (status, completed_at, processed, skipped, error_message, log_id),
            )

        conn.commit()

    def get_latest(self, conn: Connection) -> Optional[FetchLog]:
        """Most recently started run."""
        with conn.cursor() as cur:
            cur.execute("SELECT * FROM fetch_logs ORDER BY started_at DESC LIMIT 1")
            row = cur.fetchone()
            return FetchLog(**row) if row else None
