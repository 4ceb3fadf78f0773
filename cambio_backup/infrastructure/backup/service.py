"""
BackupService - Facade des operations de sauvegarde.

Responsabilite unique:
----------------------
Exposer chaque operation du moteur avec un resultat structure:
les exceptions des use cases sont converties en success=False.

Usage:
------
    service = container.backup_service
    result = service.create_backup(description="Avant cloture")
    service.restore_backup(result.snapshot_id, initiator="admin")
"""

from typing import Any, Dict, List, Optional, Tuple

from cambio_backup.application.services.audit import record_event
from cambio_backup.application.services.snapshot_store import SnapshotStore
from cambio_backup.application.use_cases import (
    BackupResult,
    CleanupBackupsUseCase,
    CleanupResult,
    CreateBackupUseCase,
    ImportBackupUseCase,
    RestoreBackupUseCase,
    RestoreResult,
    VerificationResult,
    VerifyBackupUseCase,
)
from cambio_backup.domain.entities.snapshot import SnapshotType
from cambio_backup.domain.exceptions import DomainException
from cambio_backup.domain.ports.system_log import SystemLogSink
from cambio_backup.infrastructure.logging import get_logger

logger = get_logger(__name__)


def error_message(error: Exception) -> str:
    """Message lisible d'une exception (sans le code pour les erreurs metier)."""
    if isinstance(error, DomainException):
        return error.message
    return str(error)


class BackupService:
    """
    Service de sauvegarde.

    Cree, liste, verifie, restaure, importe et supprime les backups.
    """

    def __init__(
        self,
        store: SnapshotStore,
        create_backup: CreateBackupUseCase,
        restore_backup: RestoreBackupUseCase,
        verify_backup: VerifyBackupUseCase,
        cleanup_backups: CleanupBackupsUseCase,
        import_backup: ImportBackupUseCase,
        system_log: Optional[SystemLogSink] = None,
    ):
        """
        Initialise le service de backup.

        Args:
            store: Stockage fichier + catalogue.
            create_backup: Use case de creation.
            restore_backup: Use case de restauration.
            verify_backup: Use case de verification.
            cleanup_backups: Use case de retention.
            import_backup: Use case d'import.
            system_log: Journal systeme (optionnel).
        """
        self._store = store
        self._create = create_backup
        self._restore = restore_backup
        self._verify = verify_backup
        self._cleanup = cleanup_backups
        self._import = import_backup
        self._system_log = system_log

    def create_backup(
        self,
        type: SnapshotType | str = SnapshotType.MANUAL,
        description: str = "",
        initiator: str = "system",
    ) -> BackupResult:
        """
        Cree un backup complet des tables principales.

        Args:
            type: manual, automatic ou pre-restore-safety.
            description: Description libre.
            initiator: Utilisateur ou composant a l'origine.

        Returns:
            BackupResult avec le resultat.
        """
        snapshot_type = type if isinstance(type, SnapshotType) else SnapshotType.from_string(type)
        try:
            return self._create.execute(snapshot_type, description, initiator)
        except Exception as e:
            logger.error("backup_failed", type=snapshot_type.value, error=str(e))
            record_event(
                self._system_log,
                "error",
                f"Erreur lors de la creation du backup: {error_message(e)}",
                {"type": snapshot_type.value, "error": error_message(e)},
                initiator,
            )
            return BackupResult(success=False, error=error_message(e))

    def restore_backup(self, snapshot_id: str, initiator: str = "system") -> RestoreResult:
        """
        Restaure un backup.

        Warning:
            Cette operation ecrase les donnees des tables STANDARD!

        Returns:
            RestoreResult (success=False si la restauration a ete abandonnee).
        """
        try:
            return self._restore.execute(snapshot_id, initiator)
        except Exception as e:
            logger.error("restore_failed", backup_id=snapshot_id, error=str(e))
            record_event(
                self._system_log,
                "error",
                f"Erreur lors de la restauration du backup {snapshot_id}: {error_message(e)}",
                {"backupId": snapshot_id, "error": error_message(e)},
                initiator,
            )
            return RestoreResult(success=False, snapshot_id=snapshot_id, error=error_message(e))

    def verify_backup(self, snapshot_id: str) -> VerificationResult:
        """Verifie l'integrite d'un backup sans le modifier."""
        try:
            return self._verify.execute(snapshot_id)
        except Exception as e:
            logger.error("verify_failed", backup_id=snapshot_id, error=str(e))
            return VerificationResult(valid=False, snapshot_id=snapshot_id, error=error_message(e))

    def cleanup_old_backups(self, retention_days: Optional[int] = None) -> CleanupResult:
        """
        Supprime les backups plus vieux que la retention.

        Args:
            retention_days: Retention en jours (defaut: BACKUP_RETENTION_DAYS).
        """
        try:
            result = self._cleanup.execute(retention_days)
        except Exception as e:
            logger.error("backup_cleanup_failed", error=str(e))
            return CleanupResult(error=error_message(e))

        if result.deleted:
            record_event(
                self._system_log,
                "info",
                f"Nettoyage des backups: {result.deleted_count} supprime(s)",
                {"deleted": result.deleted, "failed": result.failed},
            )
        return result

    def import_backup(
        self,
        content: bytes | str | Dict[str, Any],
        description: str = "",
        initiator: str = "system",
    ) -> BackupResult:
        """Enregistre un document de backup externe."""
        try:
            return self._import.execute(content, description, initiator)
        except Exception as e:
            logger.error("backup_import_failed", error=str(e))
            return BackupResult(success=False, error=error_message(e))

    def list_backups(self) -> List[Dict[str, Any]]:
        """
        Liste les backups du catalogue.

        Returns:
            Liste de dicts, du plus recent au plus ancien.
        """
        try:
            return [record.to_dict() for record in self._store.list_records()]
        except Exception as e:
            logger.error("backup_list_failed", error=str(e))
            return []

    def get_backup(self, snapshot_id: str) -> Optional[Dict[str, Any]]:
        """Retourne l'entree du catalogue d'un backup, ou None."""
        try:
            record = self._store.get_record(snapshot_id)
        except Exception as e:
            logger.error("backup_get_failed", backup_id=snapshot_id, error=str(e))
            return None
        return record.to_dict() if record else None

    def delete_backup(self, snapshot_id: str, initiator: str = "system") -> BackupResult:
        """Supprime le fichier et l'entree du catalogue d'un backup."""
        try:
            deleted = self._store.delete(snapshot_id)
        except Exception as e:
            logger.error("backup_delete_failed", backup_id=snapshot_id, error=str(e))
            return BackupResult(success=False, snapshot_id=snapshot_id, error=error_message(e))

        if not deleted:
            return BackupResult(
                success=False,
                snapshot_id=snapshot_id,
                error=f"Backup non trouve: {snapshot_id}",
            )

        logger.info("backup_deleted", backup_id=snapshot_id, initiator=initiator)
        record_event(
            self._system_log,
            "info",
            f"Backup {snapshot_id} supprime par l'utilisateur {initiator}",
            {"backupId": snapshot_id, "userId": initiator},
            initiator,
        )
        return BackupResult(success=True, snapshot_id=snapshot_id)

    def download_backup(self, snapshot_id: str) -> Tuple[str, bytes]:
        """
        Retourne le nom et le contenu brut du fichier de backup.

        Raises:
            BackupNotFoundError: Si le backup n'est pas au catalogue.
            StorageError: Si le fichier est absent ou illisible.
        """
        record = self._store.require_record(snapshot_id)
        return record.file_path, self._store.read_raw(record)
