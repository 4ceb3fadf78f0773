"""Storage - Stockage des fichiers de backup."""

from cambio_backup.infrastructure.storage.local_storage import LocalSnapshotStorage

__all__ = ["LocalSnapshotStorage"]
