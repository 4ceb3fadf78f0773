"""
LocalSnapshotStorage - Stockage des fichiers de backup sur disque local.

Implemente le port SnapshotStorage avec pathlib.
Les ecritures passent par un fichier temporaire renomme, un fichier
de backup n'est donc jamais visible a moitie ecrit.
"""

import os
from pathlib import Path

from cambio_backup.domain.exceptions import StorageError
from cambio_backup.domain.ports.snapshot_storage import SnapshotStorage


class LocalSnapshotStorage(SnapshotStorage):
    """
    Stockage dans un repertoire local.

    Example:
        >>> storage = LocalSnapshotStorage(Path("/var/backups/cambios"))
        >>> storage.write("backup_x.json", b"{}")
        2
    """

    def __init__(self, base_dir: Path | str):
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def _resolve(self, filename: str) -> Path:
        name = Path(filename).name
        if not name or name != filename:
            raise StorageError(f"Nom de fichier invalide: '{filename}'", filename)
        return self._base_dir / name

    def ensure_location(self) -> None:
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Impossible de creer le repertoire: {e}", str(self._base_dir)) from e

    def write(self, filename: str, content: bytes) -> int:
        path = self._resolve(filename)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            tmp_path.write_bytes(content)
            os.replace(tmp_path, path)
            return path.stat().st_size
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"Ecriture impossible: {e}", str(path)) from e

    def read(self, filename: str) -> bytes:
        path = self._resolve(filename)
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(f"Lecture impossible: {e}", str(path)) from e

    def exists(self, filename: str) -> bool:
        return self._resolve(filename).is_file()

    def size(self, filename: str) -> int:
        path = self._resolve(filename)
        try:
            return path.stat().st_size
        except OSError as e:
            raise StorageError(f"Fichier inaccessible: {e}", str(path)) from e

    def delete(self, filename: str) -> bool:
        path = self._resolve(filename)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Suppression impossible: {e}", str(path)) from e

    def path_for(self, filename: str) -> str:
        return str(self._resolve(filename))
