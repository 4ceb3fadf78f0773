"""
Value Objects du domaine.

Objets immuables (frozen dataclasses), valides par construction.
"""

from cambio_backup.domain.value_objects.snapshot_id import SnapshotId
from cambio_backup.domain.value_objects.table_kind import (
    CORE_TABLES,
    TableKind,
    TableSpec,
    core_table_names,
)

__all__ = [
    "SnapshotId",
    "TableKind",
    "TableSpec",
    "CORE_TABLES",
    "core_table_names",
]
