"""Entity: Book."""

from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

# Range of a BSON 64-bit integer
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class InvalidBookIdError(ValueError):
    """Raised when a client supplied identifier is not a valid ObjectId."""

    def __init__(self, value: Any):
        super().__init__(f"Invalid book id: {value!r}")
        self.value = value


def parse_book_id(value: Any) -> ObjectId:
    """Parse a 24-character hex string into the storage key type."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidBookIdError(value)
    return ObjectId(value)


class BookFields(BaseModel):
    """The data fields shared by every book payload."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(default="", description="Title")
    author: str = Field(default="", description="Author")
    pages: int = Field(
        default=0, ge=INT64_MIN, le=INT64_MAX, description="Page count"
    )
    year: int = Field(
        default=0, ge=INT64_MIN, le=INT64_MAX, description="Publication year"
    )
    isbn: str = Field(default="", description="ISBN, may be empty")


class BookCreate(BookFields):
    """Payload accepted by the create endpoint."""


class BookUpdate(BookFields):
    """Payload accepted by the update endpoint: a full replacement field set."""

    id: str = Field(description="Identifier of the book to update")


class Book(BookFields):
    """Book entity as exposed at the HTTP boundary.

    The identifier is the storage-assigned ObjectId rendered as a hex string.
    """

    id: str = Field(description="Unique identifier for the book")

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Book):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.author == other.author
            and self.pages == other.pages
            and self.year == other.year
            and self.isbn == other.isbn
        )

    def __hash__(self) -> int:
        return hash((
            self.id,
            self.name,
            self.author,
            self.pages,
            self.year,
            self.isbn,
        ))
