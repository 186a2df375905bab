"""Batch pipelines: ingestion and reprocessing."""

from .orchestrator import IngestionOrchestrator, IngestionSummary, SourceStats, print_ingestion_summary
from .reprocess import ArticleReprocessor, ReprocessSummary, clamp_limit

__all__ = [
    "ArticleReprocessor",
    "IngestionOrchestrator",
    "IngestionSummary",
    "ReprocessSummary",
    "SourceStats",
    "clamp_limit",
    "print_ingestion_summary",
]
