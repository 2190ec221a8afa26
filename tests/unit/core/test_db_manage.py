"""Collection bootstrap: creation, seeding and the unique index."""

import pytest
from pymongo.errors import OperationFailure

from src.bookstore.core.exceptions import IndexConflictError, SeedDataError
from src.bookstore.core.services import SEED_BOOKS, DbManageService
from src.bookstore.core.services.database.db_manage import UNIQUE_INDEX_NAME
from src.bookstore.entities.service.book import BookDocument


class TestEnsureCollection:
    def test_creates_missing_collection(self, mongo_client, test_config, db_manage_service):
        database = mongo_client[test_config.database.name]
        assert test_config.database.collection not in database.list_collection_names()

        db_manage_service.ensure_collection()

        assert test_config.database.collection in database.list_collection_names()

    def test_existing_collection_kept(self, collection, db_manage_service):
        collection.insert_one({"bookname": "Kept"})

        db_manage_service.ensure_collection()

        assert collection.count_documents({}) == 1


class TestSeedBooks:
    def test_first_run_inserts_three(self, collection, db_manage_service):
        assert db_manage_service.seed_books() == 3
        assert collection.count_documents({}) == 3

    def test_second_run_is_idempotent(self, collection, db_manage_service):
        db_manage_service.prepare()
        assert db_manage_service.seed_books() == 0
        assert collection.count_documents({}) == 3

    def test_partial_seed_completed(self, collection, db_manage_service):
        collection.insert_one(BookDocument.from_fields(SEED_BOOKS[1]).to_document())

        assert db_manage_service.seed_books() == 2
        assert collection.count_documents({}) == 3

    def test_duplicate_seed_is_fatal(self, collection, db_manage_service):
        document = BookDocument.from_fields(SEED_BOOKS[0]).field_values()
        collection.insert_many([dict(document), dict(document)])

        with pytest.raises(SeedDataError, match="The Vortex"):
            db_manage_service.seed_books()

    def test_seed_author_stored_as_unicode(self, collection, db_manage_service):
        db_manage_service.seed_books()
        vortex = collection.find_one({"bookname": "The Vortex"})
        assert vortex["bookauthor"] == "José Eustasio Rivera"
        assert vortex["bookpages"] == 292
        assert vortex["bookyear"] == 1924

    def test_extra_fields_cause_reseed(self, collection, db_manage_service):
        """Matching is by exact fields, so a reformatted seed is inserted again."""
        document = BookDocument.from_fields(SEED_BOOKS[2]).field_values()
        document["bookauthor"] = "E. A. Poe"
        collection.insert_one(document)

        db_manage_service.seed_books()

        assert collection.count_documents({"bookname": "The Black Cat"}) == 2


class TestEnsureIndexes:
    def test_unique_index_created(self, collection, db_manage_service):
        db_manage_service.prepare()
        assert UNIQUE_INDEX_NAME in collection.index_information()

    def test_index_idempotent(self, db_manage_service):
        db_manage_service.prepare()
        assert db_manage_service.ensure_indexes() == UNIQUE_INDEX_NAME


class TestPrepare:
    def test_vortex_once_after_ten_restarts(self, collection, db_manage_service):
        for _ in range(10):
            db_manage_service.prepare()

        assert collection.count_documents({"bookname": "The Vortex", "bookyear": 1924}) == 1
        assert collection.count_documents({}) == 3

    def test_prepare_without_seed(self, collection, db_manage_service):
        db_manage_service.prepare(seed=False)
        assert collection.count_documents({}) == 0

    def test_second_service_shares_collection(self, mongo_client, test_config, collection):
        for _ in range(2):
            DbManageService(
                mongo_client[test_config.database.name], test_config.database.collection
            ).prepare()
        assert collection.count_documents({}) == 3


class _InterleavedManage(DbManageService):
    """Lets another service seed between this one's lookup and its insert."""

    def __init__(self, database, collection_name: str, other: DbManageService):
        super().__init__(database, collection_name)
        self._other = other

    def _stored_copies(self, query: dict) -> list[dict]:
        copies = super()._stored_copies(query)
        if self._other is not None:
            other, self._other = self._other, None
            other.seed_books()
        return copies


class TestConcurrentStart:
    def test_overlapping_seeding_keeps_one_copy(self, mongo_client, test_config, collection):
        database = mongo_client[test_config.database.name]
        name = test_config.database.collection
        first = DbManageService(database, name)
        second = _InterleavedManage(database, name, other=first)

        second.prepare()

        assert collection.count_documents({"bookname": "The Vortex"}) == 1
        assert collection.count_documents({}) == 3
        assert UNIQUE_INDEX_NAME in collection.index_information()

    def test_restart_after_overlapping_start(self, mongo_client, test_config, collection):
        database = mongo_client[test_config.database.name]
        name = test_config.database.collection
        _InterleavedManage(database, name, other=DbManageService(database, name)).prepare()

        DbManageService(database, name).prepare()

        assert collection.count_documents({}) == 3


class TestExistingCollection:
    @pytest.fixture
    def identical_books(self, collection):
        dune = {
            "bookname": "Dune",
            "bookauthor": "Frank Herbert",
            "bookisbn": "978-0-441-17271-9",
            "bookpages": 412,
            "bookyear": 1965,
        }
        collection.insert_many([dict(dune), dict(dune)])

    def test_identical_books_do_not_stop_bootstrap(
        self, identical_books, collection, db_manage_service
    ):
        db_manage_service.prepare()

        assert collection.count_documents({"bookname": "Dune"}) == 2
        assert collection.count_documents({}) == 5
        assert UNIQUE_INDEX_NAME not in collection.index_information()

    def test_ensure_indexes_reports_missing_index(self, identical_books, db_manage_service):
        assert db_manage_service.ensure_indexes() is None

    def test_restarts_stay_idempotent_without_index(
        self, identical_books, collection, db_manage_service
    ):
        for _ in range(3):
            db_manage_service.prepare()

        assert collection.count_documents({"bookname": "The Vortex"}) == 1

    def test_duplicate_seed_still_fatal(self, collection, db_manage_service):
        document = BookDocument.from_fields(SEED_BOOKS[1]).field_values()
        collection.insert_many([dict(document), dict(document)])

        with pytest.raises(SeedDataError, match="Frankenstein"):
            db_manage_service.prepare()

    def test_other_index_failures_are_fatal(self, collection, db_manage_service, monkeypatch):
        def _conflict(*args, **kwargs):
            raise OperationFailure("Index with name: uniq_book_fields already exists")

        monkeypatch.setattr(type(collection), "create_index", _conflict)

        with pytest.raises(IndexConflictError, match="cannot create unique index"):
            db_manage_service.prepare()
