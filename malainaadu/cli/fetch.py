"""Fetch and reprocess command implementations."""

from typing import Optional

import typer
from rich.console import Console

from ..config import Config
from ..db import get_connection, validate_connection
from ..errors import ConfigurationError
from ..factory import build_rewriter
from ..pipeline import ArticleReprocessor, IngestionOrchestrator, print_ingestion_summary

console = Console()


def _connected_config() -> Config:
    config = Config()
    console.print("[dim]Checking database connection...[/dim]")
    if not validate_connection(config.get_db_config()):
        console.print("[red]❌ Database connection failed![/red]")
        console.print("Please check your database configuration and ensure Postgres is running.")
        raise typer.Exit(1)
    return config


def fetch_command(
    max_items: Optional[int] = typer.Option(
        None,
        "--max-items",
        help="Maximum items to take from each feed",
        min=1,
    ),
) -> None:
    """Fetch every active feed and queue new articles for moderation."""
    try:
        config = _connected_config()
        settings = config.config.ingestion
        if max_items is not None:
            settings = settings.model_copy(update={"max_items_per_source": max_items})

        with get_connection(config.get_db_config()) as conn:
            orchestrator = IngestionOrchestrator(conn, build_rewriter(config), settings=settings)
            summary = orchestrator.run()

        print_ingestion_summary(summary, orchestrator.source_stats)

    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Fetch interrupted by user[/yellow]")
        raise typer.Exit(1)
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Fetch failed: {e}[/red]")
        raise typer.Exit(1)


def reprocess_command(
    limit: int = typer.Option(50, "--limit", "-l", help="Articles per batch (1-100)"),
) -> None:
    """Re-paragraph articles whose body has no paragraph breaks."""
    try:
        config = _connected_config()
        with get_connection(config.get_db_config()) as conn:
            summary = ArticleReprocessor(conn, build_rewriter(config)).run(limit)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[bold]{summary.message}[/bold]: {summary.processed}/{summary.total} articles updated")
    for error in summary.errors:
        console.print(f"  [red]- {error}[/red]")
