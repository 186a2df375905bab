"""Source management in database."""

from typing import Dict, List, Optional

from psycopg import Connection

from ..config import SourceConfig
from ..models import Source


class SourceManager:
    """Manage sources in database."""

    def sync_sources(
        self,
        conn: Connection,
        sources: List[SourceConfig],
    ) -> Dict[str, int]:
        """
        Sync sources from config to database.

        Returns:
            Mapping of feed URL to database ID
        """
        source_map = {}

        with conn.cursor() as cur:
            for source in sources:
                # Upsert source
                cur.execute(
                    """
                    INSERT INTO sources (name, rss_url, is_active, logo_url)
                    VALUES (%s, %s, %s, %s)
                    ON CONFLICT (rss_url) DO UPDATE SET
                        name = EXCLUDED.name,
                        is_active = EXCLUDED.is_active,
                        logo_url = EXCLUDED.logo_url
                    RETURNING id
                    """,
                    (source.name, source.rss_url, source.is_active, source.logo_url),
                )

                source_map[source.rss_url] = cur.fetchone()["id"]

        conn.commit()
        return source_map

    def get_sources(self, conn: Connection) -> List[Source]:
        """Get all sources from database."""
        with conn.cursor() as cur:
            cur.execute("SELECT * FROM sources ORDER BY name")
            return [Source(**row) for row in cur.fetchall()]

    def get_active_sources(self, conn: Connection) -> List[Source]:
        """Get sources the ingestion run should fetch."""
        with conn.cursor() as cur:
            cur.execute("SELECT * FROM sources WHERE is_active = TRUE ORDER BY name")
            return [Source(**row) for row in cur.fetchall()]

    def get_by_name(self, conn: Connection, name: str) -> Optional[Source]:
        """Look up a source by display name."""
        with conn.cursor() as cur:
            cur.execute("SELECT * FROM sources WHERE name = %s LIMIT 1", (name,))
            row = cur.fetchone()
            return Source(**row) if row else None

    def add_source(
        self,
        conn: Connection,
        name: str,
        rss_url: str,
        logo_url: Optional[str] = None,
    ) -> Optional[Source]:
        """
        Add a source.

        Returns:
            The new source, or None when the feed URL is already registered
        """
        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO sources (name, rss_url, logo_url)
                VALUES (%s, %s, %s)
                ON CONFLICT (rss_url) DO NOTHING
                RETURNING *
                """,
                (name, rss_url, logo_url),
            )
            row = cur.fetchone()
        conn.commit()
        return Source(**row) if row else None

    def set_active(self, conn: Connection, source_id: int, is_active: bool) -> bool:
        """Enable or disable a source."""
        with conn.cursor() as cur:
            cur.execute(
                "UPDATE sources SET is_active = %s WHERE id = %s",
                (is_active, source_id),
            )
            updated = cur.rowcount > 0
        conn.commit()
        return updated

    def remove_source(self, conn: Connection, source_id: int) -> bool:
        """Delete a source; its articles keep a null source reference."""
        with conn.cursor() as cur:
            cur.execute("DELETE FROM sources WHERE id = %s", (source_id,))
            deleted = cur.rowcount > 0
        conn.commit()
        return deleted
