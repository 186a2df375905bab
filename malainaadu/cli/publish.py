"""Publish and health command implementations."""

from typing import List

import typer
from rich.console import Console
from rich.table import Table

from ..config import Config
from ..db import get_connection
from ..errors import ConfigurationError, EmailError
from ..factory import build_mailer, build_publisher
from ..health import HealthMonitor

console = Console()


def publish_command(
    article_ids: List[int] = typer.Argument(..., help="Article IDs to post to Facebook"),
) -> None:
    """Post articles to Facebook through the webhook relay."""
    config = Config()
    with get_connection(config.get_db_config()) as conn:
        results = build_publisher(config, conn).publish_many(article_ids)

    table = Table(title="Facebook Publishing")
    table.add_column("Article", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("Log", style="dim")
    table.add_column("Details")

    for result in results:
        status = "[green]✓[/green]" if result.success else "[red]✗[/red]"
        details = result.error or result.message or ""
        table.add_row(str(result.article_id), status, str(result.log_id or "-"), details)

    console.print(table)
    if not all(r.success for r in results):
        raise typer.Exit(1)


def health_command() -> None:
    """Check fetch health and email subscribers when something is wrong."""
    config = Config()
    try:
        config.require_email_api_key()
        with get_connection(config.get_db_config()) as conn:
            report = HealthMonitor(conn, build_mailer(config), settings=config.config.health).check()
    except (ConfigurationError, EmailError) as e:
        console.print(f"[red]Health check failed: {e}[/red]")
        raise typer.Exit(1)

    style = {"healthy": "green", "unhealthy": "yellow", "alert_sent": "red"}[report.status]
    console.print(f"[bold {style}]Status: {report.status}[/bold {style}]")
    if report.message:
        console.print(report.message)
    for alert in report.alerts:
        console.print(f"  • {alert.message} [dim]({alert.details})[/dim]")
    if report.recipients:
        console.print(f"Alert sent to {len(report.recipients)} recipient(s)")
