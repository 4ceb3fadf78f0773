"""
SQLAlchemyScheduleConfigRepository - Adapter SQLAlchemy pour les cadences.

Implemente le port ScheduleConfigRepository avec la table
backup_configurations. Les modifications sont validees par l'entite
ScheduleConfig avant ecriture.
"""

from dataclasses import asdict, fields
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import asc

from cambio_backup.domain.entities.schedule_config import RunStatus, ScheduleConfig
from cambio_backup.domain.exceptions import SchedulingError
from cambio_backup.domain.ports.schedule_repository import ScheduleConfigRepository
from cambio_backup.infrastructure.persistence.catalog_repository import as_utc, catalog_errors
from cambio_backup.infrastructure.persistence.database import DatabaseManager
from cambio_backup.infrastructure.persistence.models import BackupConfiguration

# Champs modifiables via update()
EDITABLE_FIELDS = {
    "name",
    "description",
    "enabled",
    "cadence_type",
    "trigger_time",
    "days_of_week",
    "day_of_month",
    "retention_days",
    "max_snapshots",
}


def _apply_to_model(model: BackupConfiguration, config: ScheduleConfig) -> None:
    model.name = config.name
    model.description = config.description
    model.enabled = config.enabled
    model.schedule_type = config.cadence_type.value
    model.schedule_time = config.trigger_time
    model.schedule_days = list(config.days_of_week)
    model.schedule_date = config.day_of_month
    model.retention_days = config.retention_days
    model.max_backups = config.max_snapshots


def _to_entity(model: BackupConfiguration) -> ScheduleConfig:
    return ScheduleConfig(
        id=model.id,
        name=model.name,
        description=model.description or "",
        enabled=bool(model.enabled),
        cadence_type=model.schedule_type,
        trigger_time=model.schedule_time,
        days_of_week=list(model.schedule_days or []),
        day_of_month=model.schedule_date,
        retention_days=model.retention_days,
        max_snapshots=model.max_backups,
        last_run_at=as_utc(model.last_run_at),
        last_run_status=model.last_run_status,
        next_run_at=as_utc(model.next_run_at),
        created_at=as_utc(model.created_at),
        updated_at=as_utc(model.updated_at),
    )


class SQLAlchemyScheduleConfigRepository(ScheduleConfigRepository):
    """
    Repository SQLAlchemy pour les configurations de backup automatique.

    Attributes:
        db: DatabaseManager pour les sessions.
    """

    def __init__(self, db: DatabaseManager):
        self._db = db

    def list_all(self) -> List[ScheduleConfig]:
        with catalog_errors(), self._db.get_session() as session:
            rows = session.query(BackupConfiguration).order_by(asc(BackupConfiguration.id)).all()
            return [_to_entity(row) for row in rows]

    def list_enabled(self) -> List[ScheduleConfig]:
        with catalog_errors(), self._db.get_session() as session:
            rows = (
                session.query(BackupConfiguration)
                .filter(BackupConfiguration.enabled.is_(True))
                .order_by(asc(BackupConfiguration.id))
                .all()
            )
            return [_to_entity(row) for row in rows]

    def get(self, config_id: int) -> Optional[ScheduleConfig]:
        with catalog_errors(), self._db.get_session() as session:
            row = session.get(BackupConfiguration, config_id)
            return _to_entity(row) if row else None

    def create(self, config: ScheduleConfig) -> ScheduleConfig:
        with catalog_errors(), self._db.get_session() as session:
            model = BackupConfiguration()
            _apply_to_model(model, config)
            session.add(model)
            session.flush()
            return _to_entity(model)

    def update(self, config_id: int, changes: Dict[str, Any]) -> Optional[ScheduleConfig]:
        """
        Applique des modifications partielles.

        Raises:
            SchedulingError: Champ inconnu ou configuration resultante invalide.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise SchedulingError(f"Champs non modifiables: {', '.join(sorted(unknown))}", config_id)

        with catalog_errors(), self._db.get_session() as session:
            model = session.get(BackupConfiguration, config_id)
            if model is None:
                return None

            current = asdict(_to_entity(model))
            current.update(changes)
            merged = ScheduleConfig(**{f.name: current[f.name] for f in fields(ScheduleConfig)})

            _apply_to_model(model, merged)
            session.flush()
            return _to_entity(model)

    def delete(self, config_id: int) -> bool:
        with catalog_errors(), self._db.get_session() as session:
            model = session.get(BackupConfiguration, config_id)
            if model is None:
                return False
            session.delete(model)
            return True

    def mark_run(
        self,
        config_id: int,
        status: RunStatus,
        at: datetime,
        next_run_at: Optional[datetime] = None,
    ) -> bool:
        with catalog_errors(), self._db.get_session() as session:
            model = session.get(BackupConfiguration, config_id)
            if model is None:
                return False
            model.last_run_at = at
            model.last_run_status = status.value
            if next_run_at is not None:
                model.next_run_at = next_run_at
            return True

    def set_next_run(self, config_id: int, next_run_at: Optional[datetime]) -> bool:
        with catalog_errors(), self._db.get_session() as session:
            model = session.get(BackupConfiguration, config_id)
            if model is None:
                return False
            model.next_run_at = next_run_at
            return True
