"""Init command implementation."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import Config, ConfigModel, SourceConfig, load_sources, save_config, save_sources
from ..db import SourceManager, get_connection, init_database, validate_connection

console = Console()


def create_default_sources() -> List[SourceConfig]:
    """Default Tamil and Malay news feeds."""
    return [
        SourceConfig(
            name="Malaysiakini Tamil",
            rss_url="https://www.malaysiakini.com/ta/rss",
        ),
        SourceConfig(
            name="Makkal Osai",
            rss_url="https://makkalosai.com.my/feed/",
        ),
        SourceConfig(
            name="Malaysia Nanban",
            rss_url="https://www.malaysiananban.com/feed/",
        ),
        SourceConfig(
            name="Berita Harian",
            rss_url="https://www.bharian.com.my/feed",
        ),
        SourceConfig(
            name="Bernama",
            rss_url="https://www.bernama.com/bm/rss.php",
        ),
    ]


def init_command(
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        "-c",
        help="Configuration directory (default: ~/.config/malainaadu)",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("malainaadu", "--db-name", help="Database name"),
    db_user: str = typer.Option("malainaadu", "--db-user", help="Database user"),
    seed_sources: bool = typer.Option(
        True,
        "--seed-sources/--no-seed-sources",
        help="Seed default news sources",
    ),
) -> None:
    """Write a config, create the schema and seed categories and sources."""
    console.print(Panel.fit("📰 MalaiNaadu - Initialization", style="bold blue"))

    config_path = (config_dir / "config.yaml") if config_dir else Config().config_path
    config = Config(config_path)

    if config_path.exists():
        console.print(f"ℹ️  Keeping existing config: {config_path}")
    else:
        model = ConfigModel(
            postgres={
                "host": db_host,
                "port": db_port,
                "database": db_name,
                "user": db_user,
            },
        )
        save_config(model, config_path)
        console.print(f"✅ Created config: {config_path}")

    sources_path = config.sources_path
    if sources_path.exists():
        sources = load_sources(sources_path)
        console.print(f"ℹ️  Keeping existing sources: {sources_path} ({len(sources)} sources)")
    else:
        sources = create_default_sources() if seed_sources else []
        save_sources(sources, sources_path)
        console.print(f"✅ Created sources: {sources_path} ({len(sources)} sources)")

    console.print("\n[bold]Testing database connection...[/bold]")
    db_config = config.get_db_config()

    if not validate_connection(db_config):
        console.print(
            "[red]❌ Database connection failed![/red]\n"
            "Please ensure Postgres is running and credentials are correct.\n"
            "Set the password via environment variable: [bold]export MALAINAADU_DB_PASSWORD=your_password[/bold]\n"
            "or a full DSN: [bold]export DATABASE_URL=postgresql://...[/bold]"
        )
        raise typer.Exit(1)

    console.print("✅ Database connection successful")

    console.print("\n[bold]Initializing database schema...[/bold]")
    try:
        init_database(db_config)
        console.print("✅ Database schema initialized, categories seeded")
        if sources:
            with get_connection(db_config) as conn:
                synced = SourceManager().sync_sources(conn, sources)
            console.print(f"✅ Synced {len(synced)} sources")
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        Panel(
            f"[green]✅ MalaiNaadu initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Sources: {sources_path}\n\n"
            f"Next steps:\n"
            f"1. Set the rewrite API key: [bold]export GEMINI_API_KEY=your_key[/bold]\n"
            f"2. Set the relay: [bold]export MAKE_WEBHOOK_URL=... PUBLISH_WEBHOOK_KEY=...[/bold]\n"
            f"3. Set the email key: [bold]export RESEND_API_KEY=your_key[/bold]\n"
            f"4. Run: [bold]malainaadu fetch[/bold]",
            style="green",
        )
    )
