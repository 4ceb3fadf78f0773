"""
SnapshotStore - Couple fichier de backup + entree du catalogue.

Responsabilite unique:
----------------------
Garantir que le fichier et l'entree du catalogue existent ensemble
ou pas du tout, et fournir lecture, listing et suppression.

Creation atomique:
------------------
1. Ecriture du fichier JSON
2. Insertion de l'entree du catalogue
3. Si l'insertion echoue: suppression du fichier puis propagation
   (un echec de cette suppression est trace, pas retente)
"""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

import structlog

from cambio_backup.domain.entities.catalog_record import CatalogRecord
from cambio_backup.domain.entities.snapshot import Snapshot
from cambio_backup.domain.exceptions import (
    BackupNotFoundError,
    CatalogError,
    SnapshotValidationError,
    StorageError,
)
from cambio_backup.domain.ports.catalog_repository import CatalogRepository
from cambio_backup.domain.ports.snapshot_storage import SnapshotStorage

logger = structlog.get_logger(__name__)


def _json_default(value: Any) -> Any:
    """Convertit les types non JSON (dates, decimaux, UUID) en texte."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    raise TypeError(f"Type non serialisable: {type(value).__name__}")


def dump_document(document: Dict[str, Any]) -> bytes:
    """Serialise un document de backup (JSON indente, UTF-8)."""
    return json.dumps(
        document, indent=2, ensure_ascii=False, default=_json_default
    ).encode("utf-8")


def load_document(content: bytes | str) -> Dict[str, Any]:
    """
    Parse un document de backup.

    Raises:
        SnapshotValidationError: Si le contenu n'est pas un objet JSON.
    """
    try:
        if isinstance(content, bytes):
            content = content.decode("utf-8")
        document = json.loads(content)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SnapshotValidationError(f"Erreur de parsing du fichier de backup: {e}") from e

    if not isinstance(document, dict):
        raise SnapshotValidationError("Le document de backup doit etre un objet JSON")
    return document


class SnapshotStore:
    """
    Stockage durable des backups.

    Example:
        >>> store = SnapshotStore(storage, catalog)
        >>> persisted, record = store.save(snapshot)
        >>> store.load_snapshot(record).total_records
        128
    """

    def __init__(self, storage: SnapshotStorage, catalog: CatalogRepository) -> None:
        self._storage = storage
        self._catalog = catalog

    def ensure_location(self) -> None:
        self._storage.ensure_location()

    def save(
        self,
        snapshot: Snapshot,
        document: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Snapshot, CatalogRecord]:
        """
        Persiste un backup (fichier puis catalogue).

        Args:
            snapshot: Backup a persister.
            document: Document a ecrire tel quel (defaut: snapshot.to_document()).

        Returns:
            (snapshot avec taille renseignee, entree du catalogue).

        Raises:
            StorageError: Si l'ecriture du fichier echoue.
            CatalogError: Si l'insertion echoue (le fichier est supprime).
        """
        filename = snapshot.id.filename
        content = dump_document(document if document is not None else snapshot.to_document())

        size = self._storage.write(filename, content)
        persisted = snapshot.with_size(size)
        record = CatalogRecord.from_snapshot(persisted, filename, size)

        try:
            self._catalog.add(record)
        except CatalogError:
            self._discard_orphan(filename)
            raise
        except Exception as e:
            self._discard_orphan(filename)
            raise CatalogError(str(e), snapshot.id.value) from e

        return persisted, record

    def _discard_orphan(self, filename: str) -> None:
        try:
            self._storage.delete(filename)
            logger.warning("orphan_backup_file_deleted", filename=filename)
        except Exception as e:
            logger.error("orphan_backup_file_delete_failed", filename=filename, error=str(e))

    def get_record(self, snapshot_id: str) -> Optional[CatalogRecord]:
        return self._catalog.get(snapshot_id)

    def require_record(self, snapshot_id: str) -> CatalogRecord:
        """Retourne l'entree du catalogue ou leve BackupNotFoundError."""
        record = self._catalog.get(snapshot_id)
        if record is None:
            raise BackupNotFoundError(snapshot_id)
        return record

    def list_records(self) -> List[CatalogRecord]:
        return self._catalog.list_all()

    def list_older_than(self, cutoff: datetime) -> List[CatalogRecord]:
        return self._catalog.list_older_than(cutoff)

    def file_exists(self, record: CatalogRecord) -> bool:
        return self._storage.exists(record.file_path)

    def file_size(self, record: CatalogRecord) -> int:
        return self._storage.size(record.file_path)

    def path_for(self, record: CatalogRecord) -> str:
        return self._storage.path_for(record.file_path)

    def read_raw(self, record: CatalogRecord) -> bytes:
        """
        Lit le contenu brut du fichier.

        Raises:
            StorageError: Si le fichier est absent ou illisible.
        """
        if not self._storage.exists(record.file_path):
            raise StorageError(
                "Fichier de backup non trouve",
                self._storage.path_for(record.file_path),
            )
        return self._storage.read(record.file_path)

    def read_document(self, record: CatalogRecord) -> Dict[str, Any]:
        return load_document(self.read_raw(record))

    def load_snapshot(self, record: CatalogRecord) -> Snapshot:
        """Charge et normalise le backup d'une entree du catalogue."""
        return Snapshot.from_document(self.read_document(record), fallback_id=record.snapshot_id)

    def delete(self, snapshot_id: str) -> bool:
        """
        Supprime le fichier puis l'entree du catalogue.

        Un fichier deja absent n'empeche pas la suppression de l'entree.

        Returns:
            False si le backup n'existe pas dans le catalogue.
        """
        record = self._catalog.get(snapshot_id)
        if record is None:
            return False

        if self._storage.delete(record.file_path):
            logger.info("backup_file_deleted", filename=record.file_path)
        else:
            logger.warning("backup_file_missing", filename=record.file_path)

        return self._catalog.delete(snapshot_id)
