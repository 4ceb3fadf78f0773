"""
Services applicatifs partages par les use cases.
"""

from cambio_backup.application.services.audit import record_event
from cambio_backup.application.services.snapshot_store import (
    SnapshotStore,
    dump_document,
    load_document,
)
from cambio_backup.application.services.table_exporter import TableExporter

__all__ = [
    "TableExporter",
    "SnapshotStore",
    "dump_document",
    "load_document",
    "record_event",
]
