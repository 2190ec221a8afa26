"""Startup errors that stop a service process."""


class BookstoreStartupError(RuntimeError):
    """Base class for errors that must terminate the process at startup."""


class MissingConfigurationError(BookstoreStartupError):
    """A required configuration value (such as the database URI) is absent."""


class DatabaseUnavailableError(BookstoreStartupError):
    """The database could not be reached within the connection timeout."""


class SeedDataError(BookstoreStartupError):
    """The collection holds more than one copy of a seed record."""


class IndexConflictError(BookstoreStartupError):
    """The unique book index cannot be created on the collection."""
