"""
Use Case: Verification d'integrite d'un backup.

Controles ordonnes, arret au premier echec:
catalogue -> fichier -> parsing -> champs requis -> tables principales.
Aucune modification n'est effectuee.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from cambio_backup.application.services.snapshot_store import SnapshotStore
from cambio_backup.domain.entities.snapshot import Snapshot
from cambio_backup.domain.exceptions import BackupError
from cambio_backup.domain.value_objects.table_kind import CORE_TABLES, TableSpec, core_table_names


@dataclass
class VerificationResult:
    """Resultat de verification."""

    valid: bool
    snapshot_id: str
    error: Optional[str] = None
    missing_tables: List[str] = field(default_factory=list)
    tables: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        if not self.valid:
            return {"valid": False, "error": self.error, "missingTables": self.missing_tables}
        return {"valid": True, "metadata": self.metadata, "tables": self.tables}


class VerifyBackupUseCase:
    """Use Case: Verification d'un backup sans mutation."""

    def __init__(self, store: SnapshotStore, tables: tuple[TableSpec, ...] = CORE_TABLES) -> None:
        self._store = store
        self._required = core_table_names(tables)

    def execute(self, snapshot_id: str) -> VerificationResult:
        """
        Verifie un backup.

        Args:
            snapshot_id: Identifiant du backup.

        Returns:
            VerificationResult (valid=False avec la raison si echec).
        """

        def invalid(reason: str, missing: Optional[List[str]] = None) -> VerificationResult:
            return VerificationResult(
                valid=False,
                snapshot_id=snapshot_id,
                error=reason,
                missing_tables=missing or [],
            )

        try:
            record = self._store.get_record(snapshot_id)
        except BackupError as e:
            return invalid(e.message)
        if record is None:
            return invalid("Backup non trouve dans le catalogue")

        if not self._store.file_exists(record):
            return invalid("Fichier de backup non trouve")

        try:
            document = self._store.read_document(record)
        except BackupError:
            return invalid("Erreur de parsing du fichier de backup")

        has_tables = isinstance(document.get("tables"), dict) or isinstance(document.get("data"), dict)
        if not document.get("id") or "metadata" not in document or not has_tables:
            return invalid("Structure de backup invalide")

        try:
            snapshot = Snapshot.from_document(document, fallback_id=record.snapshot_id)
        except BackupError as e:
            return invalid(e.message)

        missing = snapshot.missing_tables(self._required)
        if missing:
            return invalid(f"Tables manquantes: {', '.join(missing)}", missing)

        raw_metadata = document.get("metadata")
        metadata = dict(raw_metadata) if isinstance(raw_metadata, dict) else {}
        metadata["totalRecords"] = snapshot.total_records
        metadata["totalSize"] = self._store.file_size(record)

        return VerificationResult(
            valid=True,
            snapshot_id=snapshot_id,
            tables=snapshot.table_names,
            metadata=metadata,
        )
