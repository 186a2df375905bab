"""Data models for rewriting."""

from pydantic import BaseModel, Field


class RewriteResult(BaseModel):
    """Rewritten article fields."""

    title: str = Field(..., description="Rewritten title")
    content: str = Field(..., description="Rewritten body")
    excerpt: str = Field(..., description="Short summary")
    category_slug: str = Field(..., description="Chosen category slug")
    used_fallback: bool = Field(False, description="True when the original text was kept")


class ReprocessResult(BaseModel):
    """Re-paragraphed body and excerpt."""

    content: str
    excerpt: str
