"""Serve command implementation."""

import typer
import uvicorn


def serve_command(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the HTTP API."""
    uvicorn.run("malainaadu.api.app:app", host=host, port=port, reload=reload)
