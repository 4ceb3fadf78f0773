"""
Snapshot Entity - Backup complet des tables principales.

Responsabilite unique:
----------------------
Representer un backup et sa forme de document JSON.

Formes acceptees en lecture:
----------------------------
- Standard: {"tables": {"<table>": {"data": [...], "count": n, "exported_at": ...}}}
- Importee: {"metadata": {...}, "data": {"<table>": [...]}}
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from cambio_backup.domain.exceptions import SnapshotValidationError
from cambio_backup.domain.value_objects.snapshot_id import SnapshotId

SCHEMA_VERSION = "1.0"


class SnapshotType(Enum):
    """Origine d'un backup."""

    MANUAL = "manual"                          # Demande par un operateur
    AUTOMATIC = "automatic"                    # Declenche par le scheduler
    PRE_RESTORE_SAFETY = "pre-restore-safety"  # Pris avant une restauration
    IMPORTED = "imported"                      # Fichier externe importe

    @classmethod
    def from_string(cls, value: Optional[str]) -> "SnapshotType":
        """
        Convertit une chaine en SnapshotType.

        Les valeurs historiques ("auto") sont acceptees; une valeur
        inconnue est consideree comme un import.
        """
        if not value:
            return cls.IMPORTED
        normalized = str(value).strip().lower()
        if normalized == "auto":
            return cls.AUTOMATIC
        for member in cls:
            if member.value == normalized:
                return member
        return cls.IMPORTED


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse un horodatage ISO 8601 (accepte le suffixe 'Z')."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class TableExport:
    """
    Contenu exporte d'une table.

    Attributes:
        rows: Lignes triees par cle primaire.
        exported_at: Instant de l'export.
        error: Message d'erreur si l'export a echoue.
    """

    rows: list[dict[str, Any]]
    exported_at: datetime
    error: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.rows)

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_document(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "data": self.rows,
            "count": self.count,
            "exported_at": self.exported_at.isoformat(),
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload

    @classmethod
    def from_document(cls, payload: Any, default_exported_at: datetime) -> "TableExport":
        """Lit une table depuis un document (objet standard ou tableau brut)."""
        if isinstance(payload, list):
            return cls(rows=list(payload), exported_at=default_exported_at)

        if not isinstance(payload, dict):
            raise SnapshotValidationError(
                f"Contenu de table invalide: {type(payload).__name__}"
            )

        rows = payload.get("data") or []
        if not isinstance(rows, list):
            raise SnapshotValidationError("Le champ 'data' d'une table doit etre une liste")

        return cls(
            rows=list(rows),
            exported_at=parse_timestamp(payload.get("exported_at")) or default_exported_at,
            error=payload.get("error"),
        )


@dataclass(frozen=True)
class SnapshotMetadata:
    """Metadonnees agregees d'un backup."""

    total_records: int = 0
    total_size_bytes: int = 0
    compression_used: bool = False

    def to_document(self) -> dict[str, Any]:
        return {
            "totalRecords": self.total_records,
            "totalSize": self.total_size_bytes,
            "compressionUsed": self.compression_used,
        }


@dataclass(frozen=True)
class Snapshot:
    """
    Entite Snapshot.

    Export ponctuel de toutes les tables principales, immuable
    une fois persiste.

    Attributes:
        id: Identifiant unique triable.
        created_at: Instant de creation (UTC).
        type: Origine du backup.
        description: Description libre.
        initiator: Utilisateur ou composant a l'origine.
        tables: Export par nom de table.
        metadata: Totaux (enregistrements, taille).
        schema_version: Version du format de document.
    """

    id: SnapshotId
    created_at: datetime
    type: SnapshotType
    description: str
    initiator: str
    tables: dict[str, TableExport] = field(default_factory=dict)
    metadata: SnapshotMetadata = field(default_factory=SnapshotMetadata)
    schema_version: str = SCHEMA_VERSION

    @classmethod
    def build(
        cls,
        snapshot_id: SnapshotId,
        created_at: datetime,
        type: SnapshotType,
        description: str,
        initiator: str,
        tables: dict[str, TableExport],
    ) -> "Snapshot":
        """Factory qui calcule le total d'enregistrements."""
        return cls(
            id=snapshot_id,
            created_at=created_at,
            type=type,
            description=description,
            initiator=initiator,
            tables=dict(tables),
            metadata=SnapshotMetadata(
                total_records=sum(export.count for export in tables.values())
            ),
        )

    def with_size(self, size_bytes: int) -> "Snapshot":
        """Retourne une copie avec la taille du fichier renseignee."""
        return replace(self, metadata=replace(self.metadata, total_size_bytes=size_bytes))

    @property
    def total_records(self) -> int:
        return self.metadata.total_records

    @property
    def table_names(self) -> list[str]:
        return list(self.tables.keys())

    @property
    def table_errors(self) -> dict[str, str]:
        """Erreurs d'export par table."""
        return {
            name: export.error
            for name, export in self.tables.items()
            if export.error is not None
        }

    def missing_tables(self, required: list[str]) -> list[str]:
        """Tables requises absentes du backup, dans l'ordre fourni."""
        return [name for name in required if name not in self.tables]

    def is_restorable(self, required: list[str]) -> bool:
        return not self.missing_tables(required)

    def to_document(self) -> dict[str, Any]:
        """Serialise au format de fichier de backup."""
        return {
            "id": self.id.value,
            "timestamp": self.created_at.isoformat(),
            "type": self.type.value,
            "description": self.description,
            "userId": self.initiator,
            "version": self.schema_version,
            "tables": {
                name: export.to_document() for name, export in self.tables.items()
            },
            "metadata": self.metadata.to_document(),
        }

    @classmethod
    def from_document(
        cls,
        document: Any,
        fallback_id: Optional[str] = None,
    ) -> "Snapshot":
        """
        Reconstruit un Snapshot depuis un document JSON.

        Args:
            document: Document parse (forme standard ou importee).
            fallback_id: Identifiant a utiliser si le document n'en a pas.

        Returns:
            Snapshot normalise.

        Raises:
            SnapshotValidationError: Si le document n'a ni 'tables' ni 'data'.
        """
        if not isinstance(document, dict):
            raise SnapshotValidationError("Le document de backup doit etre un objet JSON")

        metadata = document.get("metadata") or {}
        if not isinstance(metadata, dict):
            metadata = {}

        created_at = (
            parse_timestamp(document.get("timestamp"))
            or parse_timestamp(metadata.get("timestamp"))
            or parse_timestamp(metadata.get("exportDate"))
            or datetime.now(timezone.utc)
        )

        raw_tables = document.get("tables")
        if not isinstance(raw_tables, dict):
            raw_tables = document.get("data")
        if not isinstance(raw_tables, dict):
            raise SnapshotValidationError(
                "Structure de backup invalide: le document doit contenir "
                "un objet 'tables' ou 'data'"
            )

        tables = {
            name: TableExport.from_document(payload, created_at)
            for name, payload in raw_tables.items()
        }

        raw_id = document.get("id") or fallback_id
        if not raw_id:
            raise SnapshotValidationError("Identifiant de backup manquant")

        snapshot = cls.build(
            snapshot_id=SnapshotId(str(raw_id)),
            created_at=created_at,
            type=SnapshotType.from_string(document.get("type")),
            description=document.get("description") or "",
            initiator=document.get("userId") or metadata.get("userId") or "system",
            tables=tables,
        )
        return replace(
            snapshot,
            schema_version=str(document.get("version") or metadata.get("version") or SCHEMA_VERSION),
        )
