from dataclasses import dataclass

from src.bookstore.core.services import DbClientService
from src.bookstore.runtime.config.config_data import ServiceName


@dataclass
class ApplicationDependencies:
    service: ServiceName
    database_service: DbClientService
