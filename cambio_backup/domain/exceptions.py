"""
Exceptions metier du domaine.

Ces exceptions representent les echecs du moteur de sauvegarde
et sont independantes de l'infrastructure.

Taxonomie:
----------
- StorageError: lecture/ecriture du fichier de backup impossible
- CatalogError: ecriture/lecture du catalogue en base impossible
- SnapshotValidationError: structure de backup invalide ou incomplete
- PartialTableFailure: une table a echoue, les autres continuent
- SchedulingError: construction de trigger ou execution planifiee
"""

from typing import Any


class DomainException(Exception):
    """Exception de base pour toutes les erreurs du domaine."""

    def __init__(self, message: str, code: str | None = None) -> None:
        """
        Initialise une exception du domaine.

        Args:
            message: Message d'erreur descriptif.
            code: Code d'erreur optionnel pour identification programmatique.
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class BackupError(DomainException):
    """Exception de base du moteur de sauvegarde."""


class StorageError(BackupError):
    """Leve quand le fichier de backup ne peut etre ecrit, lu ou supprime."""

    def __init__(self, message: str, path: str | None = None) -> None:
        full_message = message
        if path:
            full_message = f"{message} ({path})"
        super().__init__(full_message, code="STORAGE_ERROR")
        self.path = path


class CatalogError(BackupError):
    """Leve quand le catalogue des backups est inaccessible."""

    def __init__(self, message: str, snapshot_id: str | None = None) -> None:
        full_message = message
        if snapshot_id:
            full_message = f"Backup '{snapshot_id}': {message}"
        super().__init__(full_message, code="CATALOG_ERROR")
        self.snapshot_id = snapshot_id


class BackupNotFoundError(BackupError):
    """Leve quand un backup n'existe pas dans le catalogue."""

    def __init__(self, snapshot_id: str) -> None:
        super().__init__(
            f"Backup non trouve: '{snapshot_id}'",
            code="BACKUP_NOT_FOUND"
        )
        self.snapshot_id = snapshot_id


class SnapshotValidationError(BackupError):
    """Leve quand un document de backup est malforme ou incomplet."""

    def __init__(
        self,
        message: str,
        missing_tables: list[str] | None = None
    ) -> None:
        super().__init__(message, code="INVALID_SNAPSHOT")
        self.missing_tables = list(missing_tables or [])


class PartialTableFailure(BackupError):
    """
    Leve quand une table echoue alors que les autres reussissent.

    N'interrompt jamais l'operation englobante: l'erreur est
    enregistree par table et retournee a l'appelant.
    """

    def __init__(self, table: str, reason: Any) -> None:
        super().__init__(
            f"Table '{table}': {reason}",
            code="PARTIAL_TABLE_FAILURE"
        )
        self.table = table
        self.reason = str(reason)


class SchedulingError(BackupError):
    """Leve quand un trigger ne peut etre construit ou execute."""

    def __init__(self, message: str, config_id: int | None = None) -> None:
        full_message = message
        if config_id is not None:
            full_message = f"Configuration {config_id}: {message}"
        super().__init__(full_message, code="SCHEDULING_ERROR")
        self.config_id = config_id
