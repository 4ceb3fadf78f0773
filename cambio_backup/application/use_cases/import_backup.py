"""
Use Case: Import d'un backup externe.

Accepte les deux formes de document (standard 'tables' ou importee
'data'). Le document est conserve tel quel, avec un nouvel
identifiant et le type "imported"; la restauration normalise
la forme a la lecture.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import structlog

from cambio_backup.application.services.audit import record_event
from cambio_backup.application.services.snapshot_store import SnapshotStore, load_document
from cambio_backup.application.use_cases.create_backup import BackupResult
from cambio_backup.domain.entities.snapshot import Snapshot, SnapshotType
from cambio_backup.domain.exceptions import SnapshotValidationError
from cambio_backup.domain.ports.system_log import SystemLogSink
from cambio_backup.domain.value_objects.snapshot_id import SnapshotId
from cambio_backup.domain.value_objects.table_kind import CORE_TABLES, TableSpec, core_table_names

logger = structlog.get_logger(__name__)


class ImportBackupUseCase:
    """Use Case: Enregistrement d'un document de backup externe."""

    def __init__(
        self,
        store: SnapshotStore,
        system_log: Optional[SystemLogSink] = None,
        tables: tuple[TableSpec, ...] = CORE_TABLES,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._store = store
        self._system_log = system_log
        self._required = core_table_names(tables)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def execute(
        self,
        content: bytes | str | Dict[str, Any],
        description: str = "",
        initiator: str = "system",
    ) -> BackupResult:
        """
        Importe un document de backup.

        Args:
            content: Contenu JSON brut ou document deja parse.
            description: Description du backup importe.
            initiator: Utilisateur a l'origine de l'import.

        Returns:
            BackupResult du backup enregistre.

        Raises:
            SnapshotValidationError: Document invalide ou sans table principale.
            StorageError, CatalogError: Si l'enregistrement echoue.
        """
        document = dict(content) if isinstance(content, dict) else load_document(content)

        imported_at = self._clock()
        snapshot_id = SnapshotId.generate(imported_at)

        original_id = document.get("id")
        document["id"] = snapshot_id.value
        document["type"] = SnapshotType.IMPORTED.value
        document["timestamp"] = imported_at.isoformat()
        document["description"] = description or document.get("description") or "Backup importe"
        document["userId"] = initiator

        snapshot = Snapshot.from_document(document)
        missing = snapshot.missing_tables(self._required)
        if len(missing) == len(self._required):
            raise SnapshotValidationError(
                "Le document importe ne contient aucune table principale",
                missing_tables=missing,
            )

        self._store.ensure_location()
        persisted, record = self._store.save(snapshot, document=document)

        logger.info(
            "backup_imported",
            backup_id=record.snapshot_id,
            original_id=original_id,
            total_records=record.total_records,
            missing_tables=missing,
        )

        record_event(
            self._system_log,
            "success",
            f"Backup importe: {record.snapshot_id}",
            {
                "backupId": record.snapshot_id,
                "originalId": original_id,
                "totalRecords": record.total_records,
                "fileSize": record.file_size_bytes,
                "missingTables": missing,
            },
            initiator,
        )

        return BackupResult(
            success=True,
            snapshot_id=record.snapshot_id,
            file_path=self._store.path_for(record),
            metadata=persisted.metadata.to_document(),
            timestamp=imported_at.isoformat(),
        )
