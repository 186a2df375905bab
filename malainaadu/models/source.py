"""Source model for RSS feed sources."""

from typing import Optional

from pydantic import Field

from .base import DBModel


class Source(DBModel):
    """RSS feed source model."""

    name: str = Field(..., description="Display name")
    rss_url: str = Field(..., description="RSS feed URL (unique)")
    is_active: bool = Field(True, description="Whether the source is fetched")
    logo_url: Optional[str] = Field(None, description="Source logo")
