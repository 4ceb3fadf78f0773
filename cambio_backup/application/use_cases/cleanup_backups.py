"""
Use Case: Retention - suppression des backups anciens.

Supprime (fichier + entree du catalogue) chaque backup cree avant
maintenant - retention_days, du plus ancien au plus recent.
Un backup plus jeune que la fenetre de retention n'est jamais supprime.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import structlog

from cambio_backup.application.services.snapshot_store import SnapshotStore

logger = structlog.get_logger(__name__)


@dataclass
class CleanupResult:
    """
    Resultat d'un nettoyage.

    Attributes:
        deleted: Backups supprimes, du plus ancien au plus recent.
        failed: Erreur par backup non supprime.
        cutoff: Date limite appliquee.
        error: Raison si le nettoyage n'a pu etre mene.
    """

    deleted: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    cutoff: Optional[datetime] = None
    error: Optional[str] = None

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)

    @property
    def success(self) -> bool:
        return self.error is None and not self.failed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "deletedCount": self.deleted_count,
            "deleted": self.deleted,
            "failed": self.failed,
            "error": self.error,
        }


class CleanupBackupsUseCase:
    """
    Use Case: Nettoyage par anciennete.

    Example:
        >>> use_case = CleanupBackupsUseCase(store, retention_days=90)
        >>> use_case.execute().deleted_count
        3
    """

    def __init__(
        self,
        store: SnapshotStore,
        retention_days: int = 90,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialise le use case.

        Args:
            store: Stockage fichier + catalogue.
            retention_days: Retention par defaut en jours.
            clock: Horloge UTC (tests).
        """
        self._store = store
        self._retention_days = retention_days
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def execute(self, retention_days: Optional[int] = None) -> CleanupResult:
        """
        Supprime les backups plus vieux que la retention.

        Args:
            retention_days: Retention a appliquer (defaut: celle du use case).

        Returns:
            CleanupResult.

        Raises:
            ValueError: Si la retention est negative.
            CatalogError: Si le catalogue ne peut etre lu.
        """
        days = self._retention_days if retention_days is None else retention_days
        if days < 0:
            raise ValueError(f"retention_days doit etre >= 0 (recu: {days})")

        cutoff = self._clock() - timedelta(days=days)
        result = CleanupResult(cutoff=cutoff)

        candidates = self._store.list_older_than(cutoff)
        if not candidates:
            logger.info("backup_cleanup_nothing_to_delete", retention_days=days)
            return result

        logger.info("backup_cleanup_started", candidates=len(candidates), retention_days=days)

        for record in candidates:
            # Age strictement superieur a la retention
            if not record.is_older_than(cutoff):
                continue
            try:
                self._store.delete(record.snapshot_id)
                result.deleted.append(record.snapshot_id)
                logger.info("backup_deleted", backup_id=record.snapshot_id)
            except Exception as e:
                result.failed[record.snapshot_id] = str(e)
                logger.error("backup_delete_failed", backup_id=record.snapshot_id, error=str(e))

        logger.info(
            "backup_cleanup_completed",
            deleted=result.deleted_count,
            failed=len(result.failed),
        )
        return result
