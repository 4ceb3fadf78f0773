"""
Configuration et fixtures pytest.
"""

import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from sqlalchemy import insert

# Ajouter le repertoire racine au path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cambio_backup.application.services.snapshot_store import SnapshotStore
from cambio_backup.application.services.table_exporter import TableExporter
from cambio_backup.application.use_cases import CreateBackupUseCase
from cambio_backup.domain.entities.catalog_record import CatalogRecord
from cambio_backup.domain.exceptions import CatalogError, StorageError
from cambio_backup.domain.ports import (
    CatalogRepository,
    SnapshotStorage,
    SystemLogSink,
    TableGateway,
)
from cambio_backup.infrastructure.backup.config import BackupSettings
from cambio_backup.infrastructure.persistence.database import DatabaseManager

FIXED_NOW = datetime(2026, 10, 17, 6, 0, 0, tzinfo=timezone.utc)


# ═══════════════════════════════════════════════════════════════════════════════
# FAKES - PORTS EN MEMOIRE
# ═══════════════════════════════════════════════════════════════════════════════

class InMemoryTableGateway(TableGateway):
    """Tables en memoire, avec tables en echec configurables."""

    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables = {name: [dict(row) for row in rows] for name, rows in (tables or {}).items()}
        self.failing: set = set()

    def _check(self, table: str) -> None:
        if table in self.failing:
            raise RuntimeError(f"relation '{table}' indisponible")

    def fetch_all(self, table: str, order_by: str = "id") -> List[Dict[str, Any]]:
        self._check(table)
        return sorted((dict(row) for row in self.tables.get(table, [])), key=lambda row: row[order_by])

    def replace_rows(self, table: str, rows: List[Dict[str, Any]]) -> int:
        self._check(table)
        self.tables[table] = [dict(row) for row in rows]
        return len(rows)

    def upsert_rows(self, table: str, rows: List[Dict[str, Any]], key: str = "id") -> int:
        self._check(table)
        current = {row[key]: row for row in self.tables.setdefault(table, [])}
        for row in rows:
            if row[key] in current:
                current[row[key]].update(row)
            else:
                new_row = dict(row)
                self.tables[table].append(new_row)
                current[row[key]] = new_row
        return len(rows)

    def count_rows(self, table: str) -> int:
        self._check(table)
        return len(self.tables.get(table, []))


class InMemorySnapshotStorage(SnapshotStorage):
    """Fichiers en memoire."""

    def __init__(self):
        self.files: Dict[str, bytes] = {}
        self.fail_writes = False
        self.location_ready = False

    def ensure_location(self) -> None:
        self.location_ready = True

    def write(self, filename: str, content: bytes) -> int:
        if self.fail_writes:
            raise StorageError("Disque plein", filename)
        self.files[filename] = content
        return len(content)

    def read(self, filename: str) -> bytes:
        if filename not in self.files:
            raise StorageError("Fichier absent", filename)
        return self.files[filename]

    def exists(self, filename: str) -> bool:
        return filename in self.files

    def size(self, filename: str) -> int:
        return len(self.read(filename))

    def delete(self, filename: str) -> bool:
        return self.files.pop(filename, None) is not None

    def path_for(self, filename: str) -> str:
        return f"/memory/{filename}"


class InMemoryCatalog(CatalogRepository):
    """Catalogue en memoire."""

    def __init__(self):
        self.records: Dict[str, CatalogRecord] = {}
        self.fail_add = False

    def add(self, record: CatalogRecord) -> None:
        if self.fail_add:
            raise CatalogError("insert refuse", record.snapshot_id)
        self.records[record.snapshot_id] = record

    def get(self, snapshot_id: str) -> Optional[CatalogRecord]:
        return self.records.get(snapshot_id)

    def list_all(self) -> List[CatalogRecord]:
        return sorted(self.records.values(), key=lambda r: r.created_at, reverse=True)

    def list_older_than(self, cutoff: datetime) -> List[CatalogRecord]:
        return sorted(
            (r for r in self.records.values() if r.created_at < cutoff),
            key=lambda r: r.created_at,
        )

    def delete(self, snapshot_id: str) -> bool:
        return self.records.pop(snapshot_id, None) is not None


class RecordingSystemLog(SystemLogSink):
    """Journal systeme qui memorise les entrees."""

    def __init__(self):
        self.entries: List[Dict[str, Any]] = []

    def write(self, level, component, message, details=None, user_id=None) -> None:
        self.entries.append({
            "level": level,
            "component": component,
            "message": message,
            "details": details,
            "user_id": user_id,
        })


# ═══════════════════════════════════════════════════════════════════════════════
# FIXTURES - DONNEES
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def fixed_now() -> datetime:
    """Instant de reference des tests (UTC)."""
    return FIXED_NOW


@pytest.fixture
def clock(fixed_now):
    """Horloge figee."""
    return lambda: fixed_now


@pytest.fixture
def business_rows() -> Dict[str, List[Dict[str, Any]]]:
    """Contenu type des tables principales."""
    return {
        "global_rate": [
            {"id": "rate-1", "rate": "7300.00", "cop_rate": "4.10", "bob_rate": "1050.00"},
        ],
        "collaborators": [
            {"id": "col-1", "name": "Patty", "base_pct": "10.00", "tx_count": 1, "status": "active"},
            {"id": "col-2", "name": "Anael", "base_pct": "0.00", "tx_count": 0, "status": "active"},
        ],
        "clients": [
            {"id": "cli-1", "name": "Maria Gonzalez", "status": "active", "total_volume_usd": "100.00"},
            {"id": "cli-2", "name": "Juan Perez", "status": "active"},
            {"id": "cli-3", "name": "Ana Benitez", "status": "inactive"},
        ],
        "transactions": [
            {
                "id": "tx-1",
                "client_name": "Maria Gonzalez",
                "collaborator_name": "Patty",
                "usd_total": "100.00",
                "commission": "5.00",
                "exchange_rate": "7300.00",
                "status": "completed",
                "chat_id": "595981000001",
                "idempotency_key": "idem-tx-1",
            },
        ],
    }


# ═══════════════════════════════════════════════════════════════════════════════
# FIXTURES - PORTS EN MEMOIRE
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def gateway(business_rows) -> InMemoryTableGateway:
    """Gateway en memoire pre-rempli."""
    return InMemoryTableGateway(business_rows)


@pytest.fixture
def storage() -> InMemorySnapshotStorage:
    return InMemorySnapshotStorage()


@pytest.fixture
def catalog() -> InMemoryCatalog:
    return InMemoryCatalog()


@pytest.fixture
def system_log() -> RecordingSystemLog:
    return RecordingSystemLog()


@pytest.fixture
def store(storage, catalog) -> SnapshotStore:
    return SnapshotStore(storage, catalog)


@pytest.fixture
def create_backup(gateway, store, system_log, clock) -> CreateBackupUseCase:
    """Use case de creation branche sur les fakes."""
    return CreateBackupUseCase(
        exporter=TableExporter(gateway, clock=clock),
        store=store,
        system_log=system_log,
        clock=clock,
    )


@pytest.fixture
def make_record(fixed_now):
    """Fabrique d'entrees de catalogue datees."""

    def _make(snapshot_id: str, age_days: float, file_path: Optional[str] = None) -> CatalogRecord:
        from cambio_backup.domain.entities.snapshot import SnapshotType

        return CatalogRecord(
            snapshot_id=snapshot_id,
            type=SnapshotType.AUTOMATIC,
            description="",
            initiator="system",
            file_path=file_path or f"backup_{snapshot_id}.json",
            total_records=0,
            file_size_bytes=2,
            created_at=fixed_now - timedelta(days=age_days),
        )

    return _make


# ═══════════════════════════════════════════════════════════════════════════════
# FIXTURES - SQLITE
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'cambios.db'}"


@pytest.fixture
def backup_settings(tmp_path, database_url) -> BackupSettings:
    """Configuration isolee (pas de .env)."""
    return BackupSettings(
        _env_file=None,
        database_url=database_url,
        backup_dir=str(tmp_path / "backups"),
        backup_retention_days=90,
    )


@pytest.fixture
def db_manager(database_url):
    """Base SQLite avec toutes les tables creees."""
    db = DatabaseManager(database_url)
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def seeded_db(db_manager, business_rows):
    """Base SQLite avec les tables principales remplies."""
    numeric = {
        "rate", "cop_rate", "bob_rate", "base_pct", "total_volume_usd",
        "usd_total", "commission", "exchange_rate",
    }
    with db_manager.get_session() as session:
        for name, rows in business_rows.items():
            table = db_manager.table(name)
            values = [
                {key: Decimal(value) if key in numeric and value is not None else value
                 for key, value in row.items()}
                for row in rows
            ]
            for row_values in values:
                session.execute(insert(table), row_values)
    return db_manager


# ═══════════════════════════════════════════════════════════════════════════════
# MARKERS
# ═══════════════════════════════════════════════════════════════════════════════

def pytest_configure(config):
    """Configure les markers personnalises."""
    config.addinivalue_line("markers", "unit: Tests unitaires rapides")
    config.addinivalue_line("markers", "integration: Tests d'integration (SQLite, fichiers)")
