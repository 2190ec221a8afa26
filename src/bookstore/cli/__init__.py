"""Main CLI application module."""

import typer
from dotenv import load_dotenv

# Configuration is read on first import of the runtime context, so .env
# values must be in the environment before the command modules load.
load_dotenv()

from .db_commands import db_app  # noqa: E402
from .serve_commands import serve  # noqa: E402

# Create the main CLI application
app = typer.Typer(
    help="📚 Bookstore CLI - run the book services and manage their collection",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command(name="serve")(serve)
app.add_typer(db_app, name="db")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
