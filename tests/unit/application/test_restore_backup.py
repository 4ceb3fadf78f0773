"""
Tests unitaires pour RestoreBackupUseCase.
"""

import json
from unittest.mock import MagicMock

import pytest

from cambio_backup.application.services.snapshot_store import dump_document
from cambio_backup.application.use_cases import RestoreBackupUseCase
from cambio_backup.domain.entities import SnapshotType
from cambio_backup.domain.exceptions import BackupNotFoundError, SnapshotValidationError, StorageError


@pytest.fixture
def restore(store, gateway, create_backup, system_log, clock):
    return RestoreBackupUseCase(store, gateway, create_backup, system_log, clock=clock)


def _rewrite(storage, snapshot_id, mutate):
    """Modifie le document d'un backup persiste."""
    filename = f"backup_{snapshot_id}.json"
    document = json.loads(storage.files[filename])
    mutate(document)
    storage.files[filename] = dump_document(document)


class TestRestoreBackupUseCase:
    """Tests pour la restauration."""

    def test_standard_tables_replaced(self, restore, create_backup, gateway):
        """Les tables STANDARD retrouvent exactement le contenu du backup."""
        backup = create_backup.execute()
        gateway.tables["clients"].append({"id": "cli-9", "name": "Nouveau"})
        gateway.tables["transactions"] = []

        result = restore.execute(backup.snapshot_id, "admin")

        assert result.all_tables_restored is True
        assert [row["id"] for row in gateway.tables["clients"]] == ["cli-1", "cli-2", "cli-3"]
        assert result.table_results["transactions"].rows_restored == 1

    def test_protected_table_keeps_new_rows(self, restore, create_backup, gateway):
        """Les lignes PROTECTED creees apres le backup survivent."""
        backup = create_backup.execute()
        gateway.tables["collaborators"].append({"id": "col-3", "name": "Nuevo", "status": "active"})
        gateway.tables["collaborators"][0]["name"] = "Renomme"

        result = restore.execute(backup.snapshot_id, "admin")

        ids = sorted(row["id"] for row in gateway.tables["collaborators"])
        assert ids == ["col-1", "col-2", "col-3"]
        assert next(r for r in gateway.tables["collaborators"] if r["id"] == "col-1")["name"] == "Patty"
        assert result.table_results["collaborators"].success is True

    def test_protected_restore_converges(self, restore, create_backup, gateway):
        """Restaurer deux fois le meme backup donne le meme etat."""
        backup = create_backup.execute()

        restore.execute(backup.snapshot_id)
        first = sorted(gateway.tables["collaborators"], key=lambda r: r["id"])
        restore.execute(backup.snapshot_id)
        second = sorted(gateway.tables["collaborators"], key=lambda r: r["id"])

        assert first == second

    def test_safety_backup_taken_first(self, restore, create_backup, catalog):
        """Un backup de securite est persiste avant toute modification."""
        backup = create_backup.execute()

        result = restore.execute(backup.snapshot_id, "admin")

        safety = catalog.get(result.safety_snapshot_id)
        assert safety is not None
        assert safety.type is SnapshotType.PRE_RESTORE_SAFETY

    def test_safety_failure_aborts_without_mutation(self, store, gateway, create_backup, storage):
        """Si le backup de securite echoue, aucune table n'est modifiee."""
        backup = create_backup.execute()
        gateway.tables["clients"] = [{"id": "cli-9", "name": "Apres"}]
        failing_create = MagicMock()
        failing_create.execute.side_effect = StorageError("Disque plein")
        restore = RestoreBackupUseCase(store, gateway, failing_create)

        with pytest.raises(StorageError):
            restore.execute(backup.snapshot_id)

        assert gateway.tables["clients"] == [{"id": "cli-9", "name": "Apres"}]

    def test_missing_table_reported_others_restored(self, restore, create_backup, gateway, storage):
        """Une table absente du backup echoue, les autres sont restaurees."""
        backup = create_backup.execute()
        _rewrite(storage, backup.snapshot_id, lambda d: d["tables"].pop("transactions"))
        gateway.tables["clients"] = []

        result = restore.execute(backup.snapshot_id)

        assert result.success is True
        assert result.failed_tables == ["transactions"]
        assert "absente" in result.table_results["transactions"].error
        assert len(gateway.tables["clients"]) == 3
        assert result.all_tables_restored is False

    def test_table_write_failure_is_local(self, restore, create_backup, gateway):
        """Un echec d'ecriture n'interrompt pas les autres tables."""
        backup = create_backup.execute()
        gateway.failing.add("global_rate")

        # Le backup de securite enregistre global_rate en echec, la restauration aussi
        result = restore.execute(backup.snapshot_id)

        assert result.failed_tables == ["global_rate"]
        assert result.table_results["clients"].success is True

    def test_failed_export_table_not_restored(self, restore, create_backup, gateway):
        """Une table exportee en echec ne vide pas la table courante."""
        gateway.failing.add("clients")
        backup = create_backup.execute()
        gateway.failing.clear()

        result = restore.execute(backup.snapshot_id)

        assert "clients" in result.failed_tables
        assert len(gateway.tables["clients"]) == 3

    def test_imported_data_shape(self, restore, create_backup, gateway, storage):
        """Un document au format 'data' est restaure."""
        backup = create_backup.execute()

        def to_data_shape(document):
            tables = document.pop("tables")
            document["data"] = {name: payload["data"] for name, payload in tables.items()}

        _rewrite(storage, backup.snapshot_id, to_data_shape)
        gateway.tables["clients"] = []

        result = restore.execute(backup.snapshot_id)

        assert result.all_tables_restored is True
        assert len(gateway.tables["clients"]) == 3

    def test_no_core_table_raises(self, restore, create_backup, storage):
        """Un backup sans aucune table principale est refuse."""
        backup = create_backup.execute()
        _rewrite(storage, backup.snapshot_id, lambda d: d.update(tables={"other": {"data": []}}))

        with pytest.raises(SnapshotValidationError):
            restore.execute(backup.snapshot_id)

    def test_unknown_backup_raises(self, restore):
        """Un backup inconnu leve BackupNotFoundError."""
        with pytest.raises(BackupNotFoundError):
            restore.execute("inconnu")

    def test_missing_file_raises(self, restore, create_backup, storage):
        """Un fichier absent leve StorageError."""
        backup = create_backup.execute()
        storage.files.clear()

        with pytest.raises(StorageError):
            restore.execute(backup.snapshot_id)

    def test_audit_entry(self, restore, create_backup, system_log):
        """La restauration est tracee avec le resultat par table."""
        backup = create_backup.execute()

        restore.execute(backup.snapshot_id, "admin")

        entry = system_log.entries[-1]
        assert entry["level"] == "success"
        assert entry["details"]["backupId"] == backup.snapshot_id
        assert entry["details"]["restorationResults"]["clients"] == {"success": True, "recordsRestored": 3}
