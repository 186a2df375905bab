"""RSS ingestion."""

from .feed_fetcher import FeedFetcher, print_feed_summary
from .models import FeedResult, RawFeedItem
from .rss_parser import clean_text, parse_rss, strip_html

__all__ = [
    "FeedFetcher",
    "FeedResult",
    "RawFeedItem",
    "clean_text",
    "parse_rss",
    "print_feed_summary",
    "strip_html",
]
