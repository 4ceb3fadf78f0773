"""
Tests unitaires pour les entites du domaine.
"""

from datetime import datetime, timedelta, timezone

import pytest

from cambio_backup.domain.entities import (
    CadenceType,
    CatalogRecord,
    RunStatus,
    ScheduleConfig,
    Snapshot,
    SnapshotType,
    TableExport,
)
from cambio_backup.domain.exceptions import SchedulingError, SnapshotValidationError
from cambio_backup.domain.value_objects import SnapshotId

NOW = datetime(2026, 10, 17, 6, 0, tzinfo=timezone.utc)


def _snapshot(tables):
    return Snapshot.build(
        snapshot_id=SnapshotId("2026-10-17T06-00-00-000000Z_aaaaaaaa"),
        created_at=NOW,
        type=SnapshotType.MANUAL,
        description="test",
        initiator="admin",
        tables=tables,
    )


class TestSnapshotType:
    """Tests pour SnapshotType."""

    def test_from_string_known_values(self):
        """Les valeurs connues sont reconnues."""
        assert SnapshotType.from_string("manual") is SnapshotType.MANUAL
        assert SnapshotType.from_string("pre-restore-safety") is SnapshotType.PRE_RESTORE_SAFETY

    def test_from_string_legacy_auto(self):
        """'auto' correspond a AUTOMATIC."""
        assert SnapshotType.from_string("auto") is SnapshotType.AUTOMATIC

    def test_from_string_unknown_is_imported(self):
        """Une valeur inconnue ou absente est consideree importee."""
        assert SnapshotType.from_string(None) is SnapshotType.IMPORTED
        assert SnapshotType.from_string("weird") is SnapshotType.IMPORTED


class TestSnapshot:
    """Tests pour l'entite Snapshot."""

    def test_total_records_sums_tables(self):
        """Tables de 3 et 0 lignes: total 3, comptes 3 et 0."""
        snapshot = _snapshot({
            "a": TableExport(rows=[{"id": 1}, {"id": 2}, {"id": 3}], exported_at=NOW),
            "b": TableExport(rows=[], exported_at=NOW),
        })

        assert snapshot.total_records == 3
        assert snapshot.tables["a"].count == 3
        assert snapshot.tables["b"].count == 0

    def test_to_document_shape(self):
        """Le document suit le format de fichier de backup."""
        snapshot = _snapshot({
            "clients": TableExport(rows=[{"id": "c1"}], exported_at=NOW),
            "transactions": TableExport(rows=[], exported_at=NOW, error="timeout"),
        }).with_size(512)

        document = snapshot.to_document()

        assert document["id"] == "2026-10-17T06-00-00-000000Z_aaaaaaaa"
        assert document["type"] == "manual"
        assert document["userId"] == "admin"
        assert document["version"] == "1.0"
        assert document["tables"]["clients"] == {
            "data": [{"id": "c1"}],
            "count": 1,
            "exported_at": NOW.isoformat(),
        }
        assert document["tables"]["transactions"]["error"] == "timeout"
        assert document["metadata"] == {
            "totalRecords": 1,
            "totalSize": 512,
            "compressionUsed": False,
        }

    def test_table_errors(self):
        """table_errors liste les tables en echec."""
        snapshot = _snapshot({
            "clients": TableExport(rows=[], exported_at=NOW, error="boom"),
            "global_rate": TableExport(rows=[], exported_at=NOW),
        })

        assert snapshot.table_errors == {"clients": "boom"}

    def test_from_document_standard_shape(self):
        """La forme standard est relue a l'identique."""
        original = _snapshot({"clients": TableExport(rows=[{"id": "c1"}], exported_at=NOW)})

        parsed = Snapshot.from_document(original.to_document())

        assert parsed.id == original.id
        assert parsed.created_at == NOW
        assert parsed.tables["clients"].rows == [{"id": "c1"}]
        assert parsed.total_records == 1

    def test_from_document_data_shape(self):
        """La forme importee (data: table -> lignes) est normalisee."""
        document = {
            "metadata": {"exportDate": "2026-09-01T10:00:00Z", "version": "0.9"},
            "data": {"clients": [{"id": "c1"}, {"id": "c2"}], "global_rate": []},
        }

        parsed = Snapshot.from_document(document, fallback_id="import-1")

        assert parsed.id.value == "import-1"
        assert parsed.type is SnapshotType.IMPORTED
        assert parsed.tables["clients"].count == 2
        assert parsed.created_at == datetime(2026, 9, 1, 10, 0, tzinfo=timezone.utc)
        assert parsed.schema_version == "0.9"

    def test_from_document_without_tables_raises(self):
        """Un document sans 'tables' ni 'data' est invalide."""
        with pytest.raises(SnapshotValidationError):
            Snapshot.from_document({"id": "x", "metadata": {}})

    def test_from_document_without_id_raises(self):
        """Sans identifiant ni fallback, le document est invalide."""
        with pytest.raises(SnapshotValidationError):
            Snapshot.from_document({"tables": {}})

    def test_missing_tables(self):
        """missing_tables respecte l'ordre demande."""
        snapshot = _snapshot({"clients": TableExport(rows=[], exported_at=NOW)})

        assert snapshot.missing_tables(["global_rate", "clients", "transactions"]) == [
            "global_rate",
            "transactions",
        ]
        assert snapshot.is_restorable(["clients"]) is True


class TestCatalogRecord:
    """Tests pour CatalogRecord."""

    def test_from_snapshot(self):
        """L'entree reprend les informations du backup."""
        snapshot = _snapshot({"clients": TableExport(rows=[{"id": "c1"}], exported_at=NOW)})

        record = CatalogRecord.from_snapshot(snapshot, snapshot.id.filename, 300)

        assert record.snapshot_id == snapshot.id.value
        assert record.file_size_bytes == 300
        assert record.total_records == 1
        assert record.tables_included == frozenset({"clients"})
        assert record.status == "completed"

    def test_is_older_than_is_strict(self):
        """Une entree creee exactement a la date limite n'est pas plus ancienne."""
        record = CatalogRecord.from_snapshot(_snapshot({}), "f.json", 1)

        assert record.is_older_than(NOW) is False
        assert record.is_older_than(NOW + timedelta(seconds=1)) is True

    def test_to_dict(self):
        """to_dict expose les colonnes du catalogue."""
        record = CatalogRecord.from_snapshot(_snapshot({}), "f.json", 1)

        data = record.to_dict()

        assert data["backup_id"] == record.snapshot_id
        assert data["type"] == "manual"
        assert data["created_at"] == NOW.isoformat()


class TestScheduleConfig:
    """Tests pour ScheduleConfig."""

    def test_defaults(self):
        """Par defaut: quotidien a 02:00, actif."""
        config = ScheduleConfig(name="Nuit")

        assert config.cadence_type is CadenceType.DAILY
        assert (config.hour, config.minute) == (2, 0)
        assert config.enabled is True
        assert config.last_run_status is None

    def test_string_cadence_converted(self):
        """Une cadence texte est convertie en enum."""
        config = ScheduleConfig(name="Hebdo", cadence_type="weekly", days_of_week=[1, 5])

        assert config.cadence_type is CadenceType.WEEKLY

    @pytest.mark.parametrize("trigger_time", ["24:00", "2h", "12:60", ""])
    def test_invalid_time_raises(self, trigger_time):
        """Une heure hors HH:MM est refusee."""
        with pytest.raises(SchedulingError):
            ScheduleConfig(name="x", trigger_time=trigger_time)

    def test_invalid_cadence_raises(self):
        """Une cadence inconnue est refusee."""
        with pytest.raises(SchedulingError):
            ScheduleConfig(name="x", cadence_type="hourly")

    def test_invalid_days_raise(self):
        """Jours de semaine hors 0-6 et jour du mois hors 1-31 refuses."""
        with pytest.raises(SchedulingError):
            ScheduleConfig(name="x", days_of_week=[7])
        with pytest.raises(SchedulingError):
            ScheduleConfig(name="x", day_of_month=32)

    def test_run_lifecycle(self):
        """Scheduled -> Running -> Success."""
        config = ScheduleConfig(name="Nuit")
        next_run = NOW + timedelta(days=1)

        config.mark_scheduled(next_run)
        assert config.last_run_status is RunStatus.SCHEDULED

        config.mark_running(NOW)
        assert config.is_running is True
        assert config.last_run_at == NOW

        config.mark_success(NOW, next_run)
        assert config.last_run_status is RunStatus.SUCCESS
        assert config.next_run_at == next_run
