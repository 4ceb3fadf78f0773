"""
Tests unitaires pour les exceptions du domaine.
"""

from cambio_backup.domain.exceptions import (
    BackupError,
    BackupNotFoundError,
    CatalogError,
    DomainException,
    PartialTableFailure,
    SchedulingError,
    SnapshotValidationError,
    StorageError,
)


class TestExceptions:
    """Tests pour la taxonomie des erreurs."""

    def test_all_are_backup_errors(self):
        """Toutes les erreurs heritent de BackupError et DomainException."""
        errors = [
            StorageError("x"),
            CatalogError("x"),
            BackupNotFoundError("x"),
            SnapshotValidationError("x"),
            PartialTableFailure("clients", "x"),
            SchedulingError("x"),
        ]

        for error in errors:
            assert isinstance(error, BackupError)
            assert isinstance(error, DomainException)

    def test_str_includes_code(self):
        """__str__ prefixe le code."""
        assert str(BackupNotFoundError("abc")) == "[BACKUP_NOT_FOUND] Backup non trouve: 'abc'"

    def test_storage_error_path(self):
        """StorageError mentionne le chemin."""
        error = StorageError("Ecriture impossible", "/tmp/x.json")

        assert error.path == "/tmp/x.json"
        assert "/tmp/x.json" in error.message

    def test_partial_table_failure(self):
        """PartialTableFailure garde la table et la raison."""
        error = PartialTableFailure("clients", ValueError("colonne inconnue"))

        assert error.table == "clients"
        assert error.reason == "colonne inconnue"

    def test_snapshot_validation_missing_tables(self):
        """SnapshotValidationError porte les tables manquantes."""
        error = SnapshotValidationError("incomplet", missing_tables=["clients"])

        assert error.missing_tables == ["clients"]

    def test_scheduling_error_config_id(self):
        """SchedulingError mentionne la configuration."""
        error = SchedulingError("Heure invalide", config_id=3)

        assert error.config_id == 3
        assert error.message.startswith("Configuration 3:")
