"""Data models for ingestion."""

from typing import List, Optional

from pydantic import BaseModel, Field


class RawFeedItem(BaseModel):
    """Parsed RSS feed item. Never stored directly."""

    title: str = Field(..., description="Item title")
    link: str = Field(..., description="Item URL, the dedup key")
    description: str = Field("", description="Plain-text description")
    pub_date: str = Field("", description="Feed-supplied date, unparsed")
    image_url: Optional[str] = Field(None, description="Lead image if one was found")


class FeedResult(BaseModel):
    """Result of fetching an RSS feed."""

    source_name: str = Field(..., description="Source name")
    source_url: str = Field(..., description="RSS feed URL")
    success: bool = Field(..., description="Whether fetch was successful")
    text: str = Field("", description="Raw feed body")
    status_code: Optional[int] = Field(None, description="HTTP status when a response arrived")
    error: Optional[str] = Field(None, description="Error message if failed")
