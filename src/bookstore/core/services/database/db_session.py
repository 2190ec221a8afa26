"""MongoDB client and collection handle used across the application."""

from collections.abc import Callable

from loguru import logger
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from src.bookstore.core.exceptions import (
    DatabaseUnavailableError,
    MissingConfigurationError,
)
from src.bookstore.runtime.config.config_data import DatabaseConfig
from src.bookstore.runtime.context import get_config

ClientFactory = Callable[..., MongoClient]


class DbClientService:
    def __init__(
        self,
        db_config: DatabaseConfig | None = None,
        client_factory: ClientFactory | None = None,
    ):
        """Create the shared, connection-pooled client for this process.

        The client connects lazily; call ``connect`` to verify the server is
        reachable before serving requests.
        """
        db_config = db_config or get_config().database
        if not db_config.uri:
            raise MissingConfigurationError(
                "DATABASE_URI is not set; the services cannot start without it"
            )
        self._config = db_config
        factory = client_factory or MongoClient

        logger.info(
            "Initializing MongoDB client for {} (timeout {} ms)",
            db_config.redacted_uri,
            db_config.connect_timeout_ms,
        )
        self._client = factory(
            db_config.uri,
            serverSelectionTimeoutMS=db_config.connect_timeout_ms,
            connectTimeoutMS=db_config.connect_timeout_ms,
            maxPoolSize=db_config.max_pool_size,
            appname="bookstore",
        )

    @property
    def client(self) -> MongoClient:
        return self._client

    @property
    def database(self) -> Database:
        return self._client[self._config.name]

    @property
    def collection_name(self) -> str:
        return self._config.collection

    def get_collection(self) -> Collection:
        """Return the shared book collection."""
        return self.database[self._config.collection]

    def connect(self) -> None:
        """Ping the primary; raise DatabaseUnavailableError when unreachable."""
        try:
            self._client.admin.command("ping")
        except PyMongoError as e:
            raise DatabaseUnavailableError(
                "failed to connect to MongoDB, please make sure the database is running"
            ) from e
        logger.info("Connected to MongoDB database '{}'", self._config.name)

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error(
                "Database health check failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

    def close(self) -> None:
        self._client.close()
        logger.info("MongoDB client closed")
