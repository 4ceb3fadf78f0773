"""
TableExporter - Export d'une table complete.

Responsabilite unique:
----------------------
Lire toutes les lignes d'une table dans un ordre stable (cle primaire
ascendante). Ne leve jamais d'exception: une table en echec ne doit
pas interrompre un backup complet.
"""

from datetime import datetime, timezone
from typing import Callable, Dict, Optional

import structlog

from cambio_backup.domain.entities.snapshot import TableExport
from cambio_backup.domain.exceptions import PartialTableFailure
from cambio_backup.domain.ports.table_gateway import TableGateway
from cambio_backup.domain.value_objects.table_kind import CORE_TABLES, TableSpec

logger = structlog.get_logger(__name__)


class TableExporter:
    """
    Exporteur de tables.

    Example:
        >>> exporter = TableExporter(gateway)
        >>> export = exporter.export_table("clients")
        >>> export.count, export.error
        (42, None)
    """

    def __init__(
        self,
        gateway: TableGateway,
        tables: tuple[TableSpec, ...] = CORE_TABLES,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialise l'exporteur.

        Args:
            gateway: Acces aux tables.
            tables: Tables connues (pour la cle primaire de tri).
            clock: Horloge UTC (tests).
        """
        self._gateway = gateway
        self._specs: Dict[str, TableSpec] = {spec.name: spec for spec in tables}
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def export_table(self, name: str) -> TableExport:
        """
        Exporte toutes les lignes d'une table.

        Args:
            name: Nom de la table.

        Returns:
            TableExport avec les lignes, ou liste vide et erreur si echec.
        """
        spec = self._specs.get(name, TableSpec(name))
        exported_at = self._clock()

        try:
            rows = self._gateway.fetch_all(name, order_by=spec.primary_key)
        except Exception as e:
            failure = PartialTableFailure(name, e)
            logger.error("table_export_failed", table=name, error=failure.reason)
            return TableExport(rows=[], exported_at=exported_at, error=failure.reason)

        logger.info("table_exported", table=name, rows=len(rows))
        return TableExport(rows=list(rows), exported_at=exported_at)
