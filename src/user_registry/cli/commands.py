"""Operational CLI commands."""

import typer
from rich.console import Console
from rich.panel import Panel

from src.user_registry.api.utils.app_startup import configure_logging
from src.user_registry.core.services import DbManageService, DbSessionService
from src.user_registry.runtime.context import get_config

console = Console()

app = typer.Typer(
    help="User registry service commands",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.command(name="init-db")
def init_db(
    reset: bool = typer.Option(
        False, "--reset", help="Drop existing tables before creating them"
    ),
) -> None:
    """Create the database tables."""
    configure_logging()
    config = get_config()
    database_service = DbSessionService(config)
    manage = DbManageService(database_service.engine)
    try:
        if reset:
            if not typer.confirm("This deletes every stored user. Continue?"):
                raise typer.Abort()
            manage.drop_all()
        manage.create_all()
    finally:
        database_service.dispose()

    console.print(
        Panel.fit(
            f"[bold green]Tables ready on {config.database.backend}[/bold green]",
            border_style="green",
        )
    )


@app.command(name="serve")
def serve(
    host: str | None = typer.Option(None, help="Host to bind the server to"),
    port: int | None = typer.Option(None, help="Port to bind the server to"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """Start the API server."""
    import uvicorn

    config = get_config()
    bind_host = host or config.app.host
    bind_port = port or config.app.port

    console.print(f"[blue]Server will be available at:[/blue] http://{bind_host}:{bind_port}")
    console.print("[dim]Press Ctrl+C to stop the server[/dim]")

    uvicorn.run(
        "src.user_registry.api.http.app:get_application",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        access_log=False,
    )
