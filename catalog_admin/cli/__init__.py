"""Main CLI application module."""

import typer
from rich.panel import Panel

from catalog_admin.runtime.context import get_config

from .db_commands import db_app
from .utils import console

# Create the main CLI application
app = typer.Typer(
    help="🛠️  Catalog Admin CLI - database setup and dashboard server",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(db_app, name="db")


@app.command(name="serve")
def serve(
    host: str | None = typer.Option(None, help="Host to bind to (defaults to app.host)"),
    port: int | None = typer.Option(None, help="Port to bind to (defaults to app.port)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
    log_level: str = typer.Option(
        "info", help="Log level (debug, info, warning, error, critical)"
    ),
) -> None:
    """
    🚀 Start the product dashboard.
    """
    import uvicorn

    config = get_config()
    host = host or config.app.host
    port = port or config.app.port

    console.print(
        Panel.fit("[bold green]Starting Catalog Admin[/bold green]", border_style="green")
    )
    console.print(f"[blue]Dashboard will be available at:[/blue] http://{host}:{port}/products")
    console.print("[dim]Press Ctrl+C to stop the server[/dim]")

    uvicorn.run(
        "catalog_admin.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
