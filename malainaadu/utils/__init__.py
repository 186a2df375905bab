"""Shared helpers."""

from .dates import normalize_publish_date, parse_datetime, utcnow
from .logging import setup_logging
from .text import make_slug, truncate

__all__ = ["make_slug", "normalize_publish_date", "parse_datetime", "setup_logging", "truncate", "utcnow"]
