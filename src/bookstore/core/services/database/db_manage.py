"""Collection bootstrap run by every service at startup."""

from loguru import logger
from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import CollectionInvalid, DuplicateKeyError, OperationFailure

from src.bookstore.core.exceptions import IndexConflictError, SeedDataError
from src.bookstore.entities.service.book import BookCreate, BookDocument
from src.bookstore.entities.service.book.document import STORAGE_KEYS

SEED_BOOKS: tuple[BookCreate, ...] = (
    BookCreate(
        name="The Vortex",
        author="José Eustasio Rivera",
        isbn="958-30-0804-4",
        pages=292,
        year=1924,
    ),
    BookCreate(
        name="Frankenstein",
        author="Mary Shelley",
        isbn="978-3-649-64609-9",
        pages=280,
        year=1818,
    ),
    BookCreate(
        name="The Black Cat",
        author="Edgar Allan Poe",
        isbn="978-3-99168-238-7",
        pages=280,
        year=1843,
    ),
)

UNIQUE_INDEX_NAME = "uniq_book_fields"


class DbManageService:
    """Prepare the shared book collection: create it, seed it, index it."""

    def __init__(self, database: Database, collection_name: str):
        self._database = database
        self._collection_name = collection_name

    @property
    def collection(self) -> Collection:
        return self._database[self._collection_name]

    def ensure_collection(self) -> Collection:
        """Create the collection when it does not exist yet."""
        if self._collection_name not in self._database.list_collection_names():
            try:
                self._database.create_collection(self._collection_name)
                logger.info("Created collection '{}'", self._collection_name)
            except CollectionInvalid:
                # Another service created it between the listing and the create.
                logger.debug("Collection '{}' already exists", self._collection_name)
        return self.collection

    def _stored_copies(self, query: dict) -> list[dict]:
        """Up to two stored documents matching ``query`` exactly."""
        return list(self.collection.find(query).limit(2))

    def seed_books(self, seeds: tuple[BookCreate, ...] = SEED_BOOKS) -> int:
        """Insert every seed book that has no exact match yet.

        Returns the number of inserted books.

        Raises:
            SeedDataError: if a seed book is stored more than once.
        """
        inserted = 0
        for seed in seeds:
            document = BookDocument.from_fields(seed)
            matches = self._stored_copies(document.field_values())
            if len(matches) > 1:
                raise SeedDataError(
                    f"more records were found for seed book '{seed.name}'"
                )
            if matches:
                logger.debug("Seed book '{}' present as {}", seed.name, matches[0]["_id"])
                continue
            try:
                result = self.collection.insert_one(document.to_document())
            except DuplicateKeyError:
                # Another service inserted it between the lookup and the insert
                logger.debug("Seed book '{}' inserted concurrently", seed.name)
                continue
            inserted += 1
            logger.info("Inserted seed book '{}' as {}", seed.name, result.inserted_id)
        return inserted

    def ensure_indexes(self) -> str | None:
        """Create the unique index over every book field.

        Returns the index name, or None when books already stored twice keep
        it from being built; duplicates are then only caught by lookups.

        Raises:
            IndexConflictError: if the index cannot be created for any other
                reason, such as an existing index with different options.
        """
        keys = [(storage_key, ASCENDING) for storage_key in STORAGE_KEYS.values()]
        try:
            return self.collection.create_index(keys, name=UNIQUE_INDEX_NAME, unique=True)
        except DuplicateKeyError as e:
            logger.warning(
                "Collection '{}' holds identical books; unique index '{}' not built: {}",
                self._collection_name,
                UNIQUE_INDEX_NAME,
                e,
            )
            return None
        except OperationFailure as e:
            raise IndexConflictError(
                f"cannot create unique index on '{self._collection_name}': {e}"
            ) from e

    def prepare(self, seed: bool = True) -> Collection:
        """Run the whole bootstrap and return the ready collection.

        The index is built before seeding so services starting together cannot
        both insert the same seed book.
        """
        collection = self.ensure_collection()
        self.ensure_indexes()
        if seed:
            inserted = self.seed_books()
            logger.info("Seed check complete, {} book(s) inserted", inserted)
        return collection
