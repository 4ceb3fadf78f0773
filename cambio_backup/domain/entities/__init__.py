"""
Entites du domaine.
"""

from cambio_backup.domain.entities.catalog_record import CatalogRecord
from cambio_backup.domain.entities.schedule_config import CadenceType, RunStatus, ScheduleConfig
from cambio_backup.domain.entities.snapshot import (
    SCHEMA_VERSION,
    Snapshot,
    SnapshotMetadata,
    SnapshotType,
    TableExport,
)

__all__ = [
    "Snapshot",
    "SnapshotMetadata",
    "SnapshotType",
    "TableExport",
    "SCHEMA_VERSION",
    "CatalogRecord",
    "ScheduleConfig",
    "CadenceType",
    "RunStatus",
]
