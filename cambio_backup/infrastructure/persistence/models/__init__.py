"""
Modeles SQLAlchemy - exports centralises.

Organisation:
- base: Base declarative
- business_models: Tables metier sauvegardees
- backup_models: Catalogue et cadences de backup
- log_models: Journal systeme
"""

from cambio_backup.infrastructure.persistence.models.base import Base, utc_now

from cambio_backup.infrastructure.persistence.models.business_models import (
    GlobalRate,
    Collaborator,
    Client,
    Transaction,
)

from cambio_backup.infrastructure.persistence.models.backup_models import (
    DatabaseBackup,
    BackupConfiguration,
)

from cambio_backup.infrastructure.persistence.models.log_models import (
    SystemLog,
)

__all__ = [
    "Base",
    "utc_now",
    "GlobalRate",
    "Collaborator",
    "Client",
    "Transaction",
    "DatabaseBackup",
    "BackupConfiguration",
    "SystemLog",
]
