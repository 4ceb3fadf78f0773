"""
Value Objects pour la description des tables sauvegardees.

Chaque table principale porte un TableKind:
- PROTECTED: donnees de reference, restaurees par upsert (jamais de suppression)
- STANDARD: donnees operationnelles, restaurees par suppression + insertion
"""

from dataclasses import dataclass
from enum import Enum


class TableKind(Enum):
    """Type de table, determine la strategie de reconciliation."""

    PROTECTED = "protected"
    STANDARD = "standard"


@dataclass(frozen=True, slots=True)
class TableSpec:
    """
    Description d'une table principale.

    Attributes:
        name: Nom de la table en base.
        kind: Strategie de restauration.
        primary_key: Colonne de cle primaire (tri et upsert).
    """

    name: str
    kind: TableKind = TableKind.STANDARD
    primary_key: str = "id"

    @property
    def is_protected(self) -> bool:
        return self.kind is TableKind.PROTECTED


# Ordre fixe d'export et de restauration
CORE_TABLES: tuple[TableSpec, ...] = (
    TableSpec("global_rate"),
    TableSpec("collaborators", kind=TableKind.PROTECTED),
    TableSpec("clients"),
    TableSpec("transactions"),
)


def core_table_names(tables: tuple[TableSpec, ...] = CORE_TABLES) -> list[str]:
    """Retourne les noms des tables principales dans l'ordre fixe."""
    return [spec.name for spec in tables]
