"""
Port CatalogRepository - Interface pour le catalogue des backups.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from cambio_backup.domain.entities.catalog_record import CatalogRecord


class CatalogRepository(ABC):
    """
    Interface Repository pour les entrees du catalogue.

    Implementee par SQLAlchemyCatalogRepository.
    Toutes les erreurs d'acces sont levees en CatalogError.
    """

    @abstractmethod
    def add(self, record: CatalogRecord) -> None:
        """Enregistre une nouvelle entree."""
        ...

    @abstractmethod
    def get(self, snapshot_id: str) -> Optional[CatalogRecord]:
        """Recupere une entree par identifiant de backup."""
        ...

    @abstractmethod
    def list_all(self) -> List[CatalogRecord]:
        """Liste les entrees, plus recentes en premier."""
        ...

    @abstractmethod
    def list_older_than(self, cutoff: datetime) -> List[CatalogRecord]:
        """Liste les entrees creees avant cutoff, plus anciennes en premier."""
        ...

    @abstractmethod
    def delete(self, snapshot_id: str) -> bool:
        """Supprime une entree. Retourne False si absente."""
        ...
