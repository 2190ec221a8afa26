"""Database initialization script."""

from src.bookstore.core.services import DbClientService, DbManageService
from src.bookstore.entities.service.book import BookRepository


def init_db(seed: bool = True) -> int:
    """Bootstrap the shared collection and return how many books it holds."""
    database_service = DbClientService()
    try:
        database_service.connect()
        collection = DbManageService(
            database_service.database, database_service.collection_name
        ).prepare(seed=seed)
        return BookRepository(collection).count()
    finally:
        database_service.close()


if __name__ == "__main__":
    init_db()
