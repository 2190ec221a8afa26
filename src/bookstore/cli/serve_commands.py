"""Commands that run the bookstore service processes."""

from enum import Enum

import typer
from rich.panel import Panel

from src.bookstore.runtime.context import get_config

from .utils import console, require_database_uri


class Service(str, Enum):
    frontend = "frontend"
    get = "get"
    post = "post"
    put = "put"
    delete = "delete"


def serve(
    service: Service = typer.Argument(..., help="Service to run"),
    host: str | None = typer.Option(None, help="Override the configured bind address"),
    port: int | None = typer.Option(None, help="Override the configured port"),
) -> None:
    """
    🚀 Start one bookstore service under uvicorn.

    Each service listens on its own port; a reverse proxy in front of them
    routes /api/books by HTTP method and everything else to the frontend.
    """
    require_database_uri()

    import uvicorn

    from src.bookstore.api.http.app import create_app

    listener = get_config().services.for_service(service.value)
    bind_host = host or listener.host
    bind_port = port or listener.port

    console.print(
        Panel.fit(
            f"[bold green]Starting {service.value} service[/bold green]",
            border_style="green",
        )
    )
    console.print(f"[blue]Listening on:[/blue] http://{bind_host}:{bind_port}")

    uvicorn.run(
        create_app(service.value),
        host=bind_host,
        port=bind_port,
        access_log=False,  # We handle access logging in middleware
    )
