"""Run and attempt logs."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from .base import DBModel


class FetchLog(DBModel):
    """One ingestion run."""

    started_at: datetime = Field(..., description="When the run started")
    completed_at: Optional[datetime] = Field(None, description="When the run finished")
    status: str = Field("running", description="Run status (running, success, failed)")
    articles_processed: Optional[int] = Field(None, description="Articles inserted")
    articles_skipped: Optional[int] = Field(None, description="Items already stored")
    error_message: Optional[str] = Field(None, description="Joined error list")


class FacebookPostLog(DBModel):
    """One publish attempt for an article."""

    article_id: int = Field(..., description="Foreign key to articles table")
    status: str = Field("pending", description="Attempt status (pending, success, failed)")
    error_message: Optional[str] = Field(None)
    response_data: Optional[Dict[str, Any]] = Field(None, description="Relay response body")
