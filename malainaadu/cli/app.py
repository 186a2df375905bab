"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from ..utils import setup_logging
from .fetch import fetch_command, reprocess_command
from .init import init_command
from .publish import health_command, publish_command
from .serve import serve_command
from .sources import sources_app

app = typer.Typer(
    name="malainaadu",
    help="MalaiNaadu - RSS ingestion, AI rewriting and Facebook publishing",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    setup_logging(verbose)


# Register commands
app.command("init")(init_command)
app.command("fetch")(fetch_command)
app.command("health")(health_command)
app.command("publish")(publish_command)
app.command("reprocess")(reprocess_command)
app.command("serve")(serve_command)
app.add_typer(sources_app, name="sources", help="Manage RSS sources")


if __name__ == "__main__":
    app()
