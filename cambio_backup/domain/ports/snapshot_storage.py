"""
Port SnapshotStorage - Interface de stockage des fichiers de backup.

Les fichiers sont adresses par leur nom (backup_<id>.json),
relatif a l'emplacement de stockage.
"""

from abc import ABC, abstractmethod


class SnapshotStorage(ABC):
    """
    Interface de stockage des fichiers.

    Implementee par LocalSnapshotStorage.
    Toutes les erreurs d'entree/sortie sont levees en StorageError.
    """

    @abstractmethod
    def ensure_location(self) -> None:
        """Cree l'emplacement de stockage s'il n'existe pas."""
        ...

    @abstractmethod
    def write(self, filename: str, content: bytes) -> int:
        """Ecrit un fichier et retourne sa taille en octets."""
        ...

    @abstractmethod
    def read(self, filename: str) -> bytes:
        """Lit le contenu d'un fichier."""
        ...

    @abstractmethod
    def exists(self, filename: str) -> bool:
        ...

    @abstractmethod
    def size(self, filename: str) -> int:
        ...

    @abstractmethod
    def delete(self, filename: str) -> bool:
        """Supprime un fichier. Retourne False s'il n'existait pas."""
        ...

    @abstractmethod
    def path_for(self, filename: str) -> str:
        """Chemin complet d'un fichier."""
        ...
