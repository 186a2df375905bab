"""Category vocabulary."""

from typing import List, Optional

from psycopg import Connection

from ..models import Category


class CategoryManager:
    """Read the category vocabulary."""

    def get_categories(self, conn: Connection) -> List[Category]:
        """All categories, ordered by name."""
        with conn.cursor() as cur:
            cur.execute("SELECT * FROM categories ORDER BY name")
            return [Category(**row) for row in cur.fetchall()]

    def get_by_slug(self, conn: Connection, slug: str) -> Optional[Category]:
        """Look up a category by slug."""
        with conn.cursor() as cur:
            cur.execute("SELECT * FROM categories WHERE slug = %s LIMIT 1", (slug,))
            row = cur.fetchone()
            return Category(**row) if row else None
