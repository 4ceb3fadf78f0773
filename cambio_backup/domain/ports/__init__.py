"""
Ports du domaine - Interfaces implementees par l'infrastructure.
"""

from cambio_backup.domain.ports.catalog_repository import CatalogRepository
from cambio_backup.domain.ports.schedule_repository import ScheduleConfigRepository
from cambio_backup.domain.ports.snapshot_storage import SnapshotStorage
from cambio_backup.domain.ports.system_log import COMPONENT_BACKUP, SystemLogSink
from cambio_backup.domain.ports.table_gateway import TableGateway

__all__ = [
    "TableGateway",
    "CatalogRepository",
    "SnapshotStorage",
    "SystemLogSink",
    "ScheduleConfigRepository",
    "COMPONENT_BACKUP",
]
