"""
Backup Infrastructure - Sauvegarde automatisee.

Responsabilite:
---------------
Exposer les operations de sauvegarde et les executer selon les cadences.

Features:
---------
- Backups JSON des tables principales (manuel, automatique, import)
- Restauration avec backup de securite prealable
- Cadences daily / weekly / monthly en heure locale
- Retention configurable
"""

from cambio_backup.infrastructure.backup.config import BackupSettings, get_backup_settings
from cambio_backup.infrastructure.backup.service import BackupService
from cambio_backup.infrastructure.backup.scheduler import BackupScheduler

__all__ = ["BackupSettings", "get_backup_settings", "BackupService", "BackupScheduler"]
