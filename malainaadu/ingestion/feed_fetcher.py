"""RSS feed fetcher."""

import logging
from typing import List, Optional

import httpx
from rich.console import Console

from ..models import Source
from .models import FeedResult

console = Console()
logger = logging.getLogger(__name__)

FEED_ACCEPT = "application/rss+xml, application/xml, text/xml"


class FeedFetcher:
    """Fetch raw feed text, one source at a time."""

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = "BeritaMalaysia/1.0",
        client: Optional[httpx.Client] = None,
    ) -> None:
        """Initialize feed fetcher."""
        self.timeout = timeout
        self.user_agent = user_agent
        self._client = client

    def _get(self, url: str) -> httpx.Response:
        headers = {"User-Agent": self.user_agent, "Accept": FEED_ACCEPT}
        if self._client is not None:
            return self._client.get(url, headers=headers, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
            return client.get(url, headers=headers)

    def fetch(self, source: Source) -> FeedResult:
        """Fetch a single feed. Never raises; failures come back in the result."""
        try:
            response = self._get(source.rss_url)
        except httpx.TimeoutException:
            return FeedResult(
                source_name=source.name,
                source_url=source.rss_url,
                success=False,
                error=f"Request timeout after {self.timeout:g}s",
            )
        except httpx.InvalidURL as e:
            return FeedResult(
                source_name=source.name,
                source_url=source.rss_url,
                success=False,
                error=f"Invalid URL: {e}",
            )
        except httpx.HTTPError as e:
            return FeedResult(
                source_name=source.name,
                source_url=source.rss_url,
                success=False,
                error=f"HTTP error: {e}",
            )

        if not response.is_success:
            return FeedResult(
                source_name=source.name,
                source_url=source.rss_url,
                success=False,
                status_code=response.status_code,
                error=str(response.status_code),
            )

        return FeedResult(
            source_name=source.name,
            source_url=source.rss_url,
            success=True,
            status_code=response.status_code,
            text=response.text,
        )


def print_feed_summary(results: List[FeedResult]) -> None:
    """Print summary of feed fetch results."""
    successful = sum(1 for r in results if r.success)
    failed = len(results) - successful

    console.print(f"\n[bold]RSS Feed Summary:[/bold]")
    console.print(f"  Sources fetched: {len(results)}")
    console.print(f"  Successful: [green]{successful}[/green]")
    console.print(f"  Failed: [red]{failed}[/red]")

    if failed > 0:
        console.print(f"\n[bold red]Failed feeds:[/bold red]")
        for result in results:
            if not result.success:
                console.print(f"  - {result.source_name}: {result.error}")
