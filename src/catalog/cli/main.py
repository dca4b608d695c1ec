#!/usr/bin/env python3
"""Command-line interface for running and preparing the catalog service."""

import typer
import uvicorn
from rich.console import Console
from rich.panel import Panel

from src.catalog.core.services import DbSessionService
from src.catalog.runtime.context import get_config
from src.catalog.runtime.init_db import init_db

console = Console()

app = typer.Typer(
    name="catalog",
    help="Product Catalog API - serve the API and manage its database",
    rich_markup_mode="rich",
)


@app.command(name="serve")
def serve(
    host: str | None = typer.Option(None, help="Host to bind; defaults to app.host"),
    port: int | None = typer.Option(None, help="Port to bind; defaults to app.port"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
    log_level: str = typer.Option(
        "info", help="Log level (debug, info, warning, error, critical)"
    ),
) -> None:
    """
    🚀 Start the API server.

    The application is built through its factory, so the database service is
    created once per worker process.
    """
    config = get_config()
    bind_host = host or config.app.host
    bind_port = port or config.app.port

    console.print(
        Panel.fit(
            "[bold green]Starting Product Catalog API[/bold green]",
            border_style="green",
        )
    )
    console.print(f"[blue]Server will be available at:[/blue] http://{bind_host}:{bind_port}")
    console.print("[dim]Press Ctrl+C to stop the server[/dim]")

    uvicorn.run(
        "src.catalog.api.http.app:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=log_level,
        access_log=False,  # Request logging middleware handles access logs
    )


@app.command(name="init-db")
def init_database() -> None:
    """
    🗄️ Create the product tables in the configured database.
    """
    service = DbSessionService(get_config().database)
    if not service.health_check():
        console.print("[red]❌ Database is not reachable[/red]")
        raise typer.Exit(1)

    init_db(service)
    console.print("[green]✅ Database tables created[/green]")


if __name__ == "__main__":
    app()
