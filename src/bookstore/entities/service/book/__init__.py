"""Entity package: Book."""

from .document import BookDocument, build_match_filter
from .entity import (
    Book,
    BookCreate,
    BookFields,
    BookUpdate,
    InvalidBookIdError,
    parse_book_id,
)
from .repository import BookRepository, DuplicateBookError

__all__ = [
    "Book",
    "BookCreate",
    "BookDocument",
    "BookFields",
    "BookRepository",
    "BookUpdate",
    "DuplicateBookError",
    "InvalidBookIdError",
    "build_match_filter",
    "parse_book_id",
]
