"""Database maintenance commands."""

import typer
from rich.table import Table

from src.bookstore.core.exceptions import BookstoreStartupError
from src.bookstore.core.services import DbClientService
from src.bookstore.entities.service.book import BookRepository
from src.bookstore.runtime.context import get_config
from src.bookstore.runtime.init_db import init_db

from .utils import console, require_database_uri

db_app = typer.Typer(help="🗄️ Book collection commands")


@db_app.command(name="init")
def init(
    seed: bool = typer.Option(True, help="Insert the sample books when missing"),
) -> None:
    """Create the collection, insert the sample books and build the indexes."""
    require_database_uri()
    try:
        count = init_db(seed=seed)
    except BookstoreStartupError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1) from e

    console.print(
        f"[green]✅ Collection '{get_config().database.collection}' ready "
        f"with {count} book(s)[/green]"
    )


@db_app.command(name="list")
def list_books() -> None:
    """Print every stored book."""
    require_database_uri()
    database_service = DbClientService()
    try:
        database_service.connect()
        books = BookRepository(database_service.get_collection()).list_all()
    except BookstoreStartupError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1) from e
    finally:
        database_service.close()

    table = Table(title="Books")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Author")
    table.add_column("ISBN")
    table.add_column("Pages", justify="right")
    table.add_column("Year", justify="right")
    for book in books:
        table.add_row(
            book.id, book.name, book.author, book.isbn, str(book.pages), str(book.year)
        )
    console.print(table)
