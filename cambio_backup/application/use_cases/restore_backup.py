"""
Use Case: Restauration d'un backup.

Etapes:
-------
1. Chargement et validation du backup (catalogue + fichier)
2. Backup de securite pre-restauration (abandon si echec)
3. Reconciliation de chaque table principale, dans l'ordre fixe,
   selon son type (PROTECTED: upsert, STANDARD: remplacement)
4. Trace dans le journal systeme avec le resultat par table

Un echec de table n'interrompt pas les autres: l'appelant doit
consulter le resultat par table, pas un simple booleen.

Warning:
    Cette operation ecrase les donnees des tables STANDARD!
    Elle n'est pas annulable une fois demarree; le backup de securite
    permet de revenir en arriere.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import structlog

from cambio_backup.application.services.audit import record_event
from cambio_backup.application.services.snapshot_store import SnapshotStore
from cambio_backup.application.use_cases.create_backup import CreateBackupUseCase
from cambio_backup.domain.entities.snapshot import SnapshotType
from cambio_backup.domain.exceptions import PartialTableFailure, SnapshotValidationError
from cambio_backup.domain.ports.system_log import SystemLogSink
from cambio_backup.domain.ports.table_gateway import TableGateway
from cambio_backup.domain.services.reconciliation import strategy_for
from cambio_backup.domain.value_objects.table_kind import CORE_TABLES, TableSpec, core_table_names

logger = structlog.get_logger(__name__)


@dataclass
class TableRestoreResult:
    """Resultat de restauration d'une table."""

    success: bool
    rows_restored: int = 0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "recordsRestored": self.rows_restored}
        return {"success": False, "error": self.error}


@dataclass
class RestoreResult:
    """
    Resultat d'une restauration.

    Attributes:
        success: True si la restauration a ete menee a terme.
        snapshot_id: Backup restaure.
        safety_snapshot_id: Backup de securite pris avant restauration.
        table_results: Resultat par table.
        timestamp: Fin de la restauration (ISO 8601).
        error: Raison de l'abandon si success=False.
    """

    success: bool
    snapshot_id: str
    safety_snapshot_id: Optional[str] = None
    table_results: Dict[str, TableRestoreResult] = field(default_factory=dict)
    timestamp: Optional[str] = None
    error: Optional[str] = None

    @property
    def failed_tables(self) -> List[str]:
        return [name for name, result in self.table_results.items() if not result.success]

    @property
    def all_tables_restored(self) -> bool:
        return self.success and not self.failed_tables

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "backupId": self.snapshot_id,
            "safetyBackupId": self.safety_snapshot_id,
            "restorationResults": {
                name: result.to_dict() for name, result in self.table_results.items()
            },
            "timestamp": self.timestamp,
            "error": self.error,
        }


class RestoreBackupUseCase:
    """
    Use Case: Restauration d'un backup.

    Example:
        >>> use_case = RestoreBackupUseCase(store, gateway, create_backup)
        >>> result = use_case.execute("2026-10-17T02-00-00-000000Z_k3j9x0ab", "admin")
        >>> result.failed_tables
        []
    """

    def __init__(
        self,
        store: SnapshotStore,
        gateway: TableGateway,
        create_backup: CreateBackupUseCase,
        system_log: Optional[SystemLogSink] = None,
        tables: tuple[TableSpec, ...] = CORE_TABLES,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialise le use case.

        Args:
            store: Stockage fichier + catalogue.
            gateway: Acces en ecriture aux tables.
            create_backup: Use case de creation (backup de securite).
            system_log: Journal systeme (optionnel).
            tables: Tables a restaurer, dans l'ordre.
            clock: Horloge UTC (tests).
        """
        self._store = store
        self._gateway = gateway
        self._create_backup = create_backup
        self._system_log = system_log
        self._tables = tables
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def execute(self, snapshot_id: str, initiator: str = "system") -> RestoreResult:
        """
        Restaure un backup.

        Args:
            snapshot_id: Identifiant du backup.
            initiator: Utilisateur a l'origine de la restauration.

        Returns:
            RestoreResult avec le resultat par table.

        Raises:
            BackupNotFoundError: Si le backup n'est pas au catalogue.
            StorageError: Si le fichier est absent ou illisible.
            SnapshotValidationError: Si le document est invalide.
            StorageError, CatalogError: Si le backup de securite echoue.
        """
        logger.warning("restore_started", backup_id=snapshot_id, initiator=initiator)

        record = self._store.require_record(snapshot_id)
        snapshot = self._store.load_snapshot(record)

        required = core_table_names(self._tables)
        if len(snapshot.missing_tables(required)) == len(required):
            raise SnapshotValidationError(
                f"Le backup {snapshot_id} ne contient aucune table principale",
                missing_tables=required,
            )

        for name in snapshot.table_names:
            if name not in required:
                logger.warning("restore_table_skipped", backup_id=snapshot_id, table=name)

        # Aucune mutation sans backup de securite persiste
        safety = self._create_backup.execute(
            SnapshotType.PRE_RESTORE_SAFETY,
            f"Backup automatique avant restauration de {snapshot_id}",
            initiator,
        )

        results: Dict[str, TableRestoreResult] = {}
        for spec in self._tables:
            results[spec.name] = self._restore_table(spec, snapshot)

        result = RestoreResult(
            success=True,
            snapshot_id=snapshot_id,
            safety_snapshot_id=safety.snapshot_id,
            table_results=results,
            timestamp=self._clock().isoformat(),
        )

        logger.info(
            "restore_completed",
            backup_id=snapshot_id,
            safety_backup_id=safety.snapshot_id,
            failed_tables=result.failed_tables,
        )

        record_event(
            self._system_log,
            "success" if not result.failed_tables else "warning",
            f"Backup {snapshot_id} restaure par l'utilisateur {initiator}",
            {
                "backupId": snapshot_id,
                "userId": initiator,
                "safetyBackupId": safety.snapshot_id,
                "restorationResults": result.to_dict()["restorationResults"],
                "timestamp": result.timestamp,
            },
            initiator,
        )

        return result

    def _restore_table(self, spec: TableSpec, snapshot) -> TableRestoreResult:
        export = snapshot.tables.get(spec.name)
        if export is None:
            failure = PartialTableFailure(spec.name, "table absente du backup")
            logger.error("restore_table_failed", table=spec.name, error=failure.reason)
            return TableRestoreResult(success=False, error=failure.reason)

        # Export en echec: lignes vides, la table courante est conservee
        if export.failed:
            failure = PartialTableFailure(spec.name, f"export en echec dans le backup: {export.error}")
            logger.error("restore_table_failed", table=spec.name, error=failure.reason)
            return TableRestoreResult(success=False, error=failure.reason)

        try:
            restored = strategy_for(spec).apply(self._gateway, spec, export.rows)
        except Exception as e:
            failure = PartialTableFailure(spec.name, e)
            logger.error(
                "restore_table_failed",
                table=spec.name,
                kind=spec.kind.value,
                error=failure.reason,
            )
            return TableRestoreResult(success=False, error=failure.reason)

        logger.info("restore_table_completed", table=spec.name, kind=spec.kind.value, rows=restored)
        return TableRestoreResult(success=True, rows_restored=restored)
