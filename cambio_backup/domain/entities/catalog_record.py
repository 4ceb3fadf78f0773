"""
CatalogRecord Entity - Entree du catalogue des backups.

Responsabilite unique:
----------------------
Decrire un backup persiste sans contenir ses donnees.

Invariant:
----------
Une entree existe si et seulement si le fichier de backup existe.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from cambio_backup.domain.entities.snapshot import Snapshot, SnapshotType

STATUS_COMPLETED = "completed"


@dataclass(frozen=True)
class CatalogRecord:
    """
    Entree durable du catalogue.

    Attributes:
        snapshot_id: Identifiant du backup.
        type: Origine du backup.
        description: Description libre.
        initiator: Utilisateur ou composant a l'origine.
        file_path: Nom du fichier relatif au repertoire de backup.
        total_records: Nombre total de lignes exportees.
        file_size_bytes: Taille du fichier.
        tables_included: Tables presentes dans le backup.
        created_at: Instant de creation.
        status: Statut de l'entree.
    """

    snapshot_id: str
    type: SnapshotType
    description: str
    initiator: str
    file_path: str
    total_records: int
    file_size_bytes: int
    created_at: datetime
    tables_included: frozenset[str] = field(default_factory=frozenset)
    status: str = STATUS_COMPLETED

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot, file_path: str, file_size_bytes: int) -> "CatalogRecord":
        """Factory depuis un Snapshot venant d'etre ecrit."""
        return cls(
            snapshot_id=snapshot.id.value,
            type=snapshot.type,
            description=snapshot.description,
            initiator=snapshot.initiator,
            file_path=file_path,
            total_records=snapshot.total_records,
            file_size_bytes=file_size_bytes,
            tables_included=frozenset(snapshot.tables.keys()),
            created_at=snapshot.created_at,
        )

    def is_older_than(self, cutoff: datetime) -> bool:
        return self.created_at < cutoff

    def to_dict(self) -> dict[str, Any]:
        """Representation pour la couche HTTP."""
        return {
            "backup_id": self.snapshot_id,
            "type": self.type.value,
            "description": self.description,
            "user_id": self.initiator,
            "file_path": self.file_path,
            "total_records": self.total_records,
            "file_size": self.file_size_bytes,
            "tables_included": sorted(self.tables_included),
            "created_at": self.created_at.isoformat(),
            "status": self.status,
        }
