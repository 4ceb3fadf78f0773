"""
Use Cases du moteur de sauvegarde.
"""

from cambio_backup.application.use_cases.cleanup_backups import CleanupBackupsUseCase, CleanupResult
from cambio_backup.application.use_cases.create_backup import BackupResult, CreateBackupUseCase
from cambio_backup.application.use_cases.import_backup import ImportBackupUseCase
from cambio_backup.application.use_cases.restore_backup import (
    RestoreBackupUseCase,
    RestoreResult,
    TableRestoreResult,
)
from cambio_backup.application.use_cases.verify_backup import VerificationResult, VerifyBackupUseCase

__all__ = [
    "CreateBackupUseCase",
    "BackupResult",
    "RestoreBackupUseCase",
    "RestoreResult",
    "TableRestoreResult",
    "VerifyBackupUseCase",
    "VerificationResult",
    "CleanupBackupsUseCase",
    "CleanupResult",
    "ImportBackupUseCase",
]
