"""Sources management commands."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import Config
from ..db import SourceManager, get_connection
from ..ingestion import FeedFetcher, parse_rss, print_feed_summary

console = Console()
sources_app = typer.Typer(help="Manage RSS sources")


@sources_app.command("list")
def sources_list() -> None:
    """List all sources in the database."""
    config = Config()
    with get_connection(config.get_db_config()) as conn:
        sources = SourceManager().get_sources(conn)

    if not sources:
        console.print("[yellow]No sources configured. Run 'malainaadu init' or 'malainaadu sources add'.[/yellow]")
        return

    table = Table(title="News Sources")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Active", style="yellow")
    table.add_column("URL", style="blue")

    for source in sources:
        table.add_row(str(source.id), source.name, "✓" if source.is_active else "✗", source.rss_url)

    console.print(table)


@sources_app.command("add")
def sources_add(
    name: str = typer.Option(..., "--name", "-n", help="Source name"),
    url: str = typer.Option(..., "--url", "-u", help="RSS feed URL"),
    logo_url: Optional[str] = typer.Option(None, "--logo", help="Logo image URL"),
) -> None:
    """Add a new RSS source."""
    config = Config()
    with get_connection(config.get_db_config()) as conn:
        source = SourceManager().add_source(conn, name, url, logo_url)

    if source is None:
        console.print(f"[red]A source with URL {url} already exists.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Added source: {name} (id {source.id})[/green]")


@sources_app.command("remove")
def sources_remove(
    name: str = typer.Argument(..., help="Source name to remove"),
) -> None:
    """Remove a source. Its articles are kept."""
    config = Config()
    manager = SourceManager()
    with get_connection(config.get_db_config()) as conn:
        source = manager.get_by_name(conn, name)
        if source is None:
            console.print(f"[red]Source '{name}' not found.[/red]")
            raise typer.Exit(1)
        manager.remove_source(conn, source.id)

    console.print(f"[green]✅ Removed source: {name}[/green]")


def _set_active(name: str, is_active: bool) -> None:
    config = Config()
    manager = SourceManager()
    with get_connection(config.get_db_config()) as conn:
        source = manager.get_by_name(conn, name)
        if source is None:
            console.print(f"[red]Source '{name}' not found.[/red]")
            raise typer.Exit(1)
        manager.set_active(conn, source.id, is_active)

    state = "enabled" if is_active else "disabled"
    console.print(f"[green]✅ Source {state}: {name}[/green]")


@sources_app.command("enable")
def sources_enable(name: str = typer.Argument(..., help="Source name")) -> None:
    """Include a source in ingestion runs."""
    _set_active(name, True)


@sources_app.command("disable")
def sources_disable(name: str = typer.Argument(..., help="Source name")) -> None:
    """Exclude a source from ingestion runs."""
    _set_active(name, False)


@sources_app.command("test")
def sources_test(
    name: Optional[str] = typer.Argument(None, help="Source name to test (or test all)"),
) -> None:
    """Fetch and parse feeds without storing anything."""
    config = Config()
    with get_connection(config.get_db_config()) as conn:
        sources = SourceManager().get_sources(conn)

    if name:
        sources = [s for s in sources if s.name == name]
        if not sources:
            console.print(f"[red]Source '{name}' not found.[/red]")
            raise typer.Exit(1)

    settings = config.config.ingestion
    fetcher = FeedFetcher(timeout=settings.feed_timeout, user_agent=settings.user_agent)
    results = []
    for source in sources:
        if not source.is_active:
            console.print(f"[yellow]⚠️  {source.name}: Disabled[/yellow]")
            continue

        result = fetcher.fetch(source)
        results.append(result)
        if not result.success:
            console.print(f"[red]❌ {source.name}: Failed - {result.error}[/red]")
            continue

        items = list(parse_rss(result.text or ""))
        console.print(f"[green]✅ {source.name}: OK ({result.status_code}, {len(items)} items)[/green]")

    if results:
        print_feed_summary(results)
