"""Entities module with entity-centric structure.

Each entity has its own package containing:
- entity.py: Boundary models exposed by the HTTP services
- document.py: Persistence model for the MongoDB collection
- repository.py: Data access layer
"""

from .service.book import Book, BookDocument, BookRepository

__all__ = [
    "Book",
    "BookDocument",
    "BookRepository",
]
