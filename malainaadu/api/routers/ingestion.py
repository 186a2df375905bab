"""Ingestion and reprocessing endpoints."""

from typing import Optional

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel

from ...pipeline import ArticleReprocessor, IngestionOrchestrator
from ..deps import get_orchestrator, get_reprocessor

router = APIRouter()


class ReprocessRequest(BaseModel):
    limit: Optional[int] = None


@router.post("/fetch-rss")
def fetch_rss(orchestrator: IngestionOrchestrator = Depends(get_orchestrator)):
    """Run one ingestion pass. Errors propagate to the 500 handler after the fetch log is failed."""
    return orchestrator.run().to_response()


@router.post("/reprocess-articles")
def reprocess_articles(
    request: Optional[ReprocessRequest] = Body(None),
    reprocessor: ArticleReprocessor = Depends(get_reprocessor),
):
    limit = request.limit if request else None
    return reprocessor.run(limit).to_response()
