"""
Use Case: Creation d'un backup complet.

Etapes:
-------
1. Creation du repertoire de stockage si necessaire
2. Generation d'un identifiant unique triable
3. Export sequentiel de chaque table principale (une table en echec
   est enregistree avec son erreur, les autres continuent)
4. Ecriture du document JSON et calcul de sa taille
5. Insertion dans le catalogue (fichier supprime si echec)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import structlog

from cambio_backup.application.services.audit import record_event
from cambio_backup.application.services.snapshot_store import SnapshotStore
from cambio_backup.application.services.table_exporter import TableExporter
from cambio_backup.domain.entities.snapshot import Snapshot, SnapshotType
from cambio_backup.domain.ports.system_log import SystemLogSink
from cambio_backup.domain.value_objects.snapshot_id import SnapshotId
from cambio_backup.domain.value_objects.table_kind import CORE_TABLES, TableSpec

logger = structlog.get_logger(__name__)


@dataclass
class BackupResult:
    """
    Resultat d'une creation (ou d'un import) de backup.

    Attributes:
        success: True si fichier et catalogue ont ete ecrits.
        snapshot_id: Identifiant du backup.
        file_path: Chemin complet du fichier.
        metadata: totalRecords, totalSize, compressionUsed.
        timestamp: Instant de creation (ISO 8601).
        table_errors: Erreurs d'export par table.
        error: Message d'erreur si echec.
    """

    success: bool
    snapshot_id: Optional[str] = None
    file_path: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    timestamp: Optional[str] = None
    table_errors: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "backupId": self.snapshot_id,
            "filePath": self.file_path,
            "metadata": self.metadata,
            "timestamp": self.timestamp,
            "tableErrors": self.table_errors,
            "error": self.error,
        }


class CreateBackupUseCase:
    """
    Use Case: Creation d'un backup.

    Example:
        >>> use_case = CreateBackupUseCase(exporter, store)
        >>> result = use_case.execute(SnapshotType.MANUAL, "Avant cloture", "admin")
        >>> result.snapshot_id
        '2026-10-17T02-00-00-000000Z_k3j9x0ab'
    """

    def __init__(
        self,
        exporter: TableExporter,
        store: SnapshotStore,
        system_log: Optional[SystemLogSink] = None,
        tables: tuple[TableSpec, ...] = CORE_TABLES,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialise le use case.

        Args:
            exporter: Exporteur de tables.
            store: Stockage fichier + catalogue.
            system_log: Journal systeme (optionnel).
            tables: Tables a exporter, dans l'ordre.
            clock: Horloge UTC (tests).
        """
        self._exporter = exporter
        self._store = store
        self._system_log = system_log
        self._tables = tables
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def execute(
        self,
        type: SnapshotType = SnapshotType.MANUAL,
        description: str = "",
        initiator: str = "system",
    ) -> BackupResult:
        """
        Cree un backup complet.

        Returns:
            BackupResult avec success=True.

        Raises:
            StorageError: Si le fichier ne peut etre ecrit.
            CatalogError: Si le catalogue refuse l'entree (fichier supprime).
        """
        self._store.ensure_location()

        created_at = self._clock()
        snapshot_id = SnapshotId.generate(created_at)

        logger.info("backup_started", backup_id=snapshot_id.value, type=type.value)

        # Une table a la fois, dans l'ordre fixe
        tables = {}
        for spec in self._tables:
            export = self._exporter.export_table(spec.name)
            tables[spec.name] = export
            if export.failed:
                logger.warning(
                    "backup_table_failed",
                    backup_id=snapshot_id.value,
                    table=spec.name,
                    error=export.error,
                )

        snapshot = Snapshot.build(
            snapshot_id=snapshot_id,
            created_at=created_at,
            type=type,
            description=description,
            initiator=initiator,
            tables=tables,
        )

        persisted, record = self._store.save(snapshot)

        logger.info(
            "backup_completed",
            backup_id=record.snapshot_id,
            total_records=record.total_records,
            size_bytes=record.file_size_bytes,
            failed_tables=sorted(persisted.table_errors),
        )

        record_event(
            self._system_log,
            "success",
            f"Backup cree: {record.snapshot_id}",
            {
                "backupId": record.snapshot_id,
                "type": type.value,
                "totalRecords": record.total_records,
                "fileSize": record.file_size_bytes,
                "tableErrors": persisted.table_errors,
            },
            initiator,
        )

        return BackupResult(
            success=True,
            snapshot_id=record.snapshot_id,
            file_path=self._store.path_for(record),
            metadata=persisted.metadata.to_document(),
            timestamp=created_at.isoformat(),
            table_errors=persisted.table_errors,
        )
