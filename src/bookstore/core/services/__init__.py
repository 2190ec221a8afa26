"""Core services exports."""

# Database Services
from .database.db_manage import SEED_BOOKS, DbManageService
from .database.db_session import DbClientService

__all__ = [
    # Database Services
    "DbClientService",
    "DbManageService",
    "SEED_BOOKS",
]
