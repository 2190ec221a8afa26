"""Book document model."""

from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from src.bookstore.entities.service.book.entity import Book, BookFields

# Field name on the boundary models -> key in the stored document
STORAGE_KEYS = {
    "name": "bookname",
    "author": "bookauthor",
    "isbn": "bookisbn",
    "pages": "bookpages",
    "year": "bookyear",
}


class BookDocument(BaseModel):
    """Persistence model for books.

    This represents how the Book entity is stored in the collection. The
    lowercase keys are the ones the existing services already write, so
    documents created by either generation stay readable.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        extra="ignore",
    )

    id: ObjectId | None = Field(default=None, alias="_id")
    name: str = Field(default="", alias="bookname")
    author: str = Field(default="", alias="bookauthor")
    isbn: str = Field(default="", alias="bookisbn")
    pages: int = Field(default=0, alias="bookpages")
    year: int = Field(default=0, alias="bookyear")

    @classmethod
    def from_fields(cls, fields: BookFields, id: ObjectId | None = None) -> "BookDocument":
        return cls(id=id, **fields.model_dump(include=set(STORAGE_KEYS)))

    def to_document(self) -> dict[str, Any]:
        """Dump to a document ready for insertion; ``_id`` only when assigned."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def field_values(self) -> dict[str, Any]:
        """The stored data fields without the identifier."""
        return self.model_dump(by_alias=True, exclude={"id"})

    def to_entity(self) -> Book:
        if self.id is None:
            raise ValueError("Cannot build a Book from a document without an _id")
        return Book(
            id=str(self.id),
            name=self.name,
            author=self.author,
            isbn=self.isbn,
            pages=self.pages,
            year=self.year,
        )


def build_match_filter(fields: BookFields) -> dict[str, Any]:
    """Build a filter from only the non-empty, non-zero submitted fields."""
    match: dict[str, Any] = {}
    for field_name, storage_key in STORAGE_KEYS.items():
        value = getattr(fields, field_name)
        if value:
            match[storage_key] = value
    return match
