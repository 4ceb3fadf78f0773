"""
SQLAlchemyCatalogRepository - Adapter SQLAlchemy pour le catalogue des backups.

Implemente le port CatalogRepository avec la table database_backups.
Les erreurs SQLAlchemy sont levees en CatalogError.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from sqlalchemy import asc, desc
from sqlalchemy.exc import SQLAlchemyError

from cambio_backup.domain.entities.catalog_record import CatalogRecord
from cambio_backup.domain.entities.snapshot import SnapshotType
from cambio_backup.domain.exceptions import CatalogError
from cambio_backup.domain.ports.catalog_repository import CatalogRepository
from cambio_backup.infrastructure.persistence.database import DatabaseManager
from cambio_backup.infrastructure.persistence.models import DatabaseBackup


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Les dates naives (SQLite) sont stockees en UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


@contextmanager
def catalog_errors(snapshot_id: Optional[str] = None) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        raise CatalogError(str(e), snapshot_id) from e


class SQLAlchemyCatalogRepository(CatalogRepository):
    """
    Repository SQLAlchemy pour le catalogue.

    Attributes:
        db: DatabaseManager pour les sessions.
    """

    def __init__(self, db: DatabaseManager):
        self._db = db

    def add(self, record: CatalogRecord) -> None:
        with catalog_errors(record.snapshot_id), self._db.get_session() as session:
            session.add(
                DatabaseBackup(
                    backup_id=record.snapshot_id,
                    backup_type=record.type.value,
                    description=record.description,
                    user_id=record.initiator,
                    file_path=record.file_path,
                    total_records=record.total_records,
                    file_size=record.file_size_bytes,
                    tables_included=sorted(record.tables_included),
                    status=record.status,
                    created_at=as_utc(record.created_at).astimezone(timezone.utc),
                )
            )

    def get(self, snapshot_id: str) -> Optional[CatalogRecord]:
        with catalog_errors(snapshot_id), self._db.get_session() as session:
            row = (
                session.query(DatabaseBackup)
                .filter(DatabaseBackup.backup_id == snapshot_id)
                .first()
            )
            return self._to_entity(row) if row else None

    def list_all(self) -> List[CatalogRecord]:
        """Retourne le catalogue, du plus recent au plus ancien."""
        with catalog_errors(), self._db.get_session() as session:
            rows = (
                session.query(DatabaseBackup)
                .order_by(desc(DatabaseBackup.created_at), desc(DatabaseBackup.backup_id))
                .all()
            )
            return [self._to_entity(row) for row in rows]

    def list_older_than(self, cutoff: datetime) -> List[CatalogRecord]:
        """Retourne les entrees creees avant cutoff, de la plus ancienne a la plus recente."""
        cutoff = as_utc(cutoff).astimezone(timezone.utc)
        with catalog_errors(), self._db.get_session() as session:
            rows = (
                session.query(DatabaseBackup)
                .filter(DatabaseBackup.created_at < cutoff)
                .order_by(asc(DatabaseBackup.created_at), asc(DatabaseBackup.backup_id))
                .all()
            )
            return [self._to_entity(row) for row in rows]

    def delete(self, snapshot_id: str) -> bool:
        with catalog_errors(snapshot_id), self._db.get_session() as session:
            deleted = (
                session.query(DatabaseBackup)
                .filter(DatabaseBackup.backup_id == snapshot_id)
                .delete(synchronize_session=False)
            )
            return deleted > 0

    def _to_entity(self, row: DatabaseBackup) -> CatalogRecord:
        return CatalogRecord(
            snapshot_id=row.backup_id,
            type=SnapshotType.from_string(row.backup_type),
            description=row.description or "",
            initiator=row.user_id or "system",
            file_path=row.file_path,
            total_records=row.total_records or 0,
            file_size_bytes=row.file_size or 0,
            tables_included=frozenset(row.tables_included or []),
            created_at=as_utc(row.created_at),
            status=row.status,
        )
