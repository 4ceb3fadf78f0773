"""
Persistence - Adapters SQLAlchemy.

    persistence/
    ├── database.py             DatabaseManager (engine, sessions)
    ├── models/                 Modeles SQLAlchemy
    ├── table_gateway.py        Lecture/reecriture des tables metier
    ├── catalog_repository.py   Catalogue des backups
    ├── schedule_repository.py  Cadences de backup automatique
    └── system_log.py           Journal systeme
"""

from cambio_backup.infrastructure.persistence.database import DatabaseManager
from cambio_backup.infrastructure.persistence.table_gateway import SQLAlchemyTableGateway
from cambio_backup.infrastructure.persistence.catalog_repository import SQLAlchemyCatalogRepository
from cambio_backup.infrastructure.persistence.schedule_repository import (
    SQLAlchemyScheduleConfigRepository,
)
from cambio_backup.infrastructure.persistence.system_log import SQLAlchemySystemLogSink

__all__ = [
    "DatabaseManager",
    "SQLAlchemyTableGateway",
    "SQLAlchemyCatalogRepository",
    "SQLAlchemyScheduleConfigRepository",
    "SQLAlchemySystemLogSink",
]
