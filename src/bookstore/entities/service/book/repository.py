"""Book repository for data access operations."""

import re

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from src.bookstore.entities.service.book.document import (
    STORAGE_KEYS,
    BookDocument,
    build_match_filter,
)
from src.bookstore.entities.service.book.entity import (
    Book,
    BookFields,
    BookUpdate,
    parse_book_id,
)


class DuplicateBookError(Exception):
    """Raised when a book being created already exists."""

    def __init__(self, existing: Book | None):
        super().__init__("Book already exists")
        self.existing = existing


class BookRepository:
    """Data-access layer for books stored in a MongoDB collection."""

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    def list_all(self) -> list[Book]:
        """Every book in storage order."""
        return [
            BookDocument.model_validate(doc).to_entity()
            for doc in self._collection.find({})
        ]

    def search(self, text: str) -> list[Book]:
        """Books whose name or author contains ``text``, ignoring case."""
        pattern = {"$regex": re.escape(text), "$options": "i"}
        query = {"$or": [{STORAGE_KEYS["name"]: pattern}, {STORAGE_KEYS["author"]: pattern}]}
        return [
            BookDocument.model_validate(doc).to_entity()
            for doc in self._collection.find(query)
        ]

    def get(self, book_id: str | ObjectId) -> Book | None:
        doc = self._collection.find_one({"_id": parse_book_id(book_id)})
        if doc is None:
            return None
        return BookDocument.model_validate(doc).to_entity()

    def find_matching(self, fields: BookFields) -> Book | None:
        """First book matching every non-empty field of ``fields``.

        An all-empty payload builds an empty filter, which matches any book.
        """
        doc = self._collection.find_one(build_match_filter(fields))
        if doc is None:
            return None
        return BookDocument.model_validate(doc).to_entity()

    def find_exact(self, fields: BookFields) -> Book | None:
        """Book whose stored fields all equal ``fields``, empty values included."""
        doc = self._collection.find_one(BookDocument.from_fields(fields).field_values())
        if doc is None:
            return None
        return BookDocument.model_validate(doc).to_entity()

    def create(self, fields: BookFields) -> Book:
        """Insert a new book and return it with its assigned identifier.

        Raises:
            DuplicateBookError: if an identical book is already stored.
        """
        existing = self.find_exact(fields)
        if existing is not None:
            raise DuplicateBookError(existing)

        document = BookDocument.from_fields(fields)
        try:
            result = self._collection.insert_one(document.to_document())
        except DuplicateKeyError as e:
            raise DuplicateBookError(self.find_exact(fields)) from e
        document.id = result.inserted_id
        return document.to_entity()

    def update(self, book: BookUpdate) -> Book | None:
        """Replace every data field of the book with ``book.id``.

        Returns the updated book, or None when no book has that identifier.

        Raises:
            InvalidBookIdError: if ``book.id`` is not a valid identifier.
            DuplicateBookError: if the new values collide with another book.
        """
        book_id = parse_book_id(book.id)
        document = BookDocument.from_fields(book, id=book_id)
        clash = self._collection.find_one(
            {**document.field_values(), "_id": {"$ne": book_id}}
        )
        if clash is not None:
            raise DuplicateBookError(BookDocument.model_validate(clash).to_entity())
        try:
            result = self._collection.update_one(
                {"_id": book_id}, {"$set": document.field_values()}
            )
        except DuplicateKeyError as e:
            raise DuplicateBookError(self.find_exact(book)) from e
        if result.matched_count == 0:
            return None
        return document.to_entity()

    def delete(self, book_id: str | ObjectId) -> bool:
        """Delete the book with the given primary key; False when none matched."""
        result = self._collection.delete_one({"_id": parse_book_id(book_id)})
        return result.deleted_count > 0

    def count(self) -> int:
        return self._collection.count_documents({})
