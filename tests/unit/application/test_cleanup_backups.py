"""
Tests unitaires pour CleanupBackupsUseCase.
"""

import pytest

from cambio_backup.application.use_cases import CleanupBackupsUseCase


@pytest.fixture
def populated(catalog, storage, make_record):
    """Backups de 1, 10, 40 et 100 jours."""
    for snapshot_id, age in [("d1", 1), ("d10", 10), ("d40", 40), ("d100", 100)]:
        record = make_record(snapshot_id, age)
        catalog.add(record)
        storage.files[record.file_path] = b"{}"
    return catalog


class TestCleanupBackupsUseCase:
    """Tests pour la retention."""

    def test_deletes_older_than_retention_oldest_first(self, store, populated, storage, clock):
        """Seuls les backups plus vieux que la retention sont supprimes."""
        use_case = CleanupBackupsUseCase(store, retention_days=30, clock=clock)

        result = use_case.execute()

        assert result.deleted == ["d100", "d40"]
        assert sorted(populated.records) == ["d1", "d10"]
        assert "backup_d40.json" not in storage.files

    def test_override_retention(self, store, populated, clock):
        """La retention passee en argument prime."""
        use_case = CleanupBackupsUseCase(store, retention_days=90, clock=clock)

        result = use_case.execute(retention_days=5)

        assert result.deleted_count == 3
        assert list(populated.records) == ["d1"]

    def test_never_deletes_young_backups(self, store, populated, clock):
        """Rien n'est supprime si tout est dans la fenetre."""
        result = CleanupBackupsUseCase(store, retention_days=365, clock=clock).execute()

        assert result.deleted == []
        assert len(populated.records) == 4

    def test_boundary_is_kept(self, store, catalog, storage, make_record, clock):
        """Un backup d'exactement retention_days jours est conserve."""
        record = make_record("edge", 30)
        catalog.add(record)
        storage.files[record.file_path] = b"{}"

        result = CleanupBackupsUseCase(store, retention_days=30, clock=clock).execute()

        assert result.deleted == []

    def test_missing_file_tolerated(self, store, populated, storage, clock):
        """Fichier deja absent: l'entree est quand meme supprimee."""
        del storage.files["backup_d100.json"]

        result = CleanupBackupsUseCase(store, retention_days=30, clock=clock).execute()

        assert "d100" in result.deleted
        assert "d100" not in populated.records

    def test_failure_does_not_stop_sweep(self, store, populated, storage, clock):
        """Un echec de suppression est rapporte, les autres continuent."""
        original_delete = storage.delete

        def delete(filename):
            if filename == "backup_d100.json":
                raise OSError("permission refusee")
            return original_delete(filename)

        storage.delete = delete

        result = CleanupBackupsUseCase(store, retention_days=30, clock=clock).execute()

        assert result.deleted == ["d40"]
        assert "d100" in result.failed
        assert result.success is False

    def test_negative_retention_raises(self, store, clock):
        """Une retention negative est refusee."""
        with pytest.raises(ValueError):
            CleanupBackupsUseCase(store, clock=clock).execute(retention_days=-1)
