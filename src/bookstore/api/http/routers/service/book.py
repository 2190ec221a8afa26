"""Book API routers, one per HTTP verb.

Each service process mounts exactly one of these routers under ``/api/books``.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from src.bookstore.api.http.deps import get_app_config, get_book_repository
from src.bookstore.entities.service.book import (
    Book,
    BookCreate,
    BookRepository,
    BookUpdate,
    DuplicateBookError,
)
from src.bookstore.runtime.config.config_data import ConfigData

list_router = APIRouter(tags=["books"])
create_router = APIRouter(tags=["books"])
update_router = APIRouter(tags=["books"])
delete_router = APIRouter(tags=["books"])


def _duplicate(existing: Book | None) -> HTTPException:
    detail: dict[str, str | None] = {
        "message": "Book already exists",
        "id": existing.id if existing else None,
    }
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


@list_router.get("", response_model=list[Book])
def list_books(
    repository: BookRepository = Depends(get_book_repository),
) -> list[Book]:
    """List all books."""
    return repository.list_all()


@create_router.post("", response_model=Book, status_code=status.HTTP_201_CREATED)
def create_book(
    book: BookCreate,
    repository: BookRepository = Depends(get_book_repository),
    config: ConfigData = Depends(get_app_config),
) -> Book:
    """Create a new book unless it already exists."""
    if config.books.duplicate_policy == "subset":
        existing = repository.find_matching(book)
        if existing is not None:
            logger.info("Book matches existing {}; not created", existing.id)
            raise _duplicate(existing)

    try:
        created_book = repository.create(book)
    except DuplicateBookError as e:
        logger.info("Book already stored; not created")
        raise _duplicate(e.existing) from e

    logger.info("Created book {}", created_book.id)
    return created_book


@update_router.put("", response_model=Book)
def update_book(
    book_update: BookUpdate,
    repository: BookRepository = Depends(get_book_repository),
) -> Book:
    """Replace every field of a book."""
    try:
        updated_book = repository.update(book_update)
    except DuplicateBookError as e:
        raise _duplicate(e.existing) from e

    if updated_book is None:
        raise HTTPException(status_code=404, detail="Book not found")
    logger.info("Updated book {}", updated_book.id)
    return updated_book


@delete_router.delete("/{book_id}")
def delete_book(
    book_id: str,
    repository: BookRepository = Depends(get_book_repository),
) -> dict[str, str]:
    """Delete a book."""
    deleted = repository.delete(book_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Book not found")
    logger.info("Deleted book {}", book_id)
    return {"message": "Book deleted successfully"}
