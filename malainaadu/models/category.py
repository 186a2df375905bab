"""Category vocabulary model."""

from pydantic import Field

from .base import DBModel


class Category(DBModel):
    """News category."""

    name: str = Field(..., description="Display name")
    slug: str = Field(..., description="URL slug, also the rewriter vocabulary key")
