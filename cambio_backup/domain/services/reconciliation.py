"""
Service de reconciliation - Strategie de restauration par type de table.

Strategies:
-----------
- PROTECTED -> UpsertReconciliation: aucune suppression, upsert par cle
  primaire. Les lignes creees apres le backup survivent.
- STANDARD -> ReplaceReconciliation: suppression complete puis insertion
  des lignes du backup avec leurs cles d'origine.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from cambio_backup.domain.ports.table_gateway import TableGateway
from cambio_backup.domain.value_objects.table_kind import TableKind, TableSpec


class ReconciliationStrategy(ABC):
    """Strategie d'application des lignes d'un backup sur une table."""

    @abstractmethod
    def apply(
        self,
        gateway: TableGateway,
        spec: TableSpec,
        rows: List[Dict[str, Any]],
    ) -> int:
        """
        Applique les lignes sur la table.

        Returns:
            Nombre de lignes restaurees.
        """
        ...


class UpsertReconciliation(ReconciliationStrategy):
    """Insert-or-update par cle primaire, sans suppression."""

    def apply(self, gateway: TableGateway, spec: TableSpec, rows: List[Dict[str, Any]]) -> int:
        if not rows:
            return 0
        return gateway.upsert_rows(spec.name, rows, key=spec.primary_key)


class ReplaceReconciliation(ReconciliationStrategy):
    """Suppression complete puis insertion en bloc."""

    def apply(self, gateway: TableGateway, spec: TableSpec, rows: List[Dict[str, Any]]) -> int:
        return gateway.replace_rows(spec.name, rows)


_STRATEGIES: Dict[TableKind, ReconciliationStrategy] = {
    TableKind.PROTECTED: UpsertReconciliation(),
    TableKind.STANDARD: ReplaceReconciliation(),
}


def strategy_for(spec: TableSpec) -> ReconciliationStrategy:
    """Retourne la strategie associee au type de la table."""
    return _STRATEGIES[spec.kind]
