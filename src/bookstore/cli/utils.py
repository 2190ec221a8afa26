"""Shared utilities for CLI commands."""

import typer
from rich.console import Console

from src.bookstore.runtime.config.config_template import validate_config_env_vars
from src.bookstore.runtime.context import get_config

# Initialize Rich console for colored output
console = Console()


def require_database_uri() -> None:
    """Exit with status 1 when no database URI is configured."""
    if get_config().database.uri:
        return
    for var, description in validate_config_env_vars().items():
        console.print(f"[red]❌ {var} is not set ({description})[/red]")
    console.print("[red]failure to load env variable[/red]")
    raise typer.Exit(1)
