"""
Port TableGateway - Interface d'acces generique aux tables metier.

Responsabilite unique:
----------------------
Lire et reecrire le contenu complet d'une table par son nom.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class TableGateway(ABC):
    """
    Interface d'acces aux tables principales.

    Implementee par SQLAlchemyTableGateway.
    """

    @abstractmethod
    def fetch_all(self, table: str, order_by: str = "id") -> List[Dict[str, Any]]:
        """
        Retourne toutes les lignes d'une table.

        Args:
            table: Nom de la table.
            order_by: Colonne de tri ascendant.

        Returns:
            Lignes sous forme de dicts.
        """
        ...

    @abstractmethod
    def replace_rows(self, table: str, rows: List[Dict[str, Any]]) -> int:
        """
        Supprime toutes les lignes puis insere les lignes fournies.

        Les cles d'origine et l'ordre sont conserves. L'operation est
        atomique pour la table.

        Returns:
            Nombre de lignes inserees.
        """
        ...

    @abstractmethod
    def upsert_rows(self, table: str, rows: List[Dict[str, Any]], key: str = "id") -> int:
        """
        Insere ou met a jour chaque ligne par cle primaire.

        Aucune ligne existante n'est supprimee.

        Returns:
            Nombre de lignes traitees.
        """
        ...

    @abstractmethod
    def count_rows(self, table: str) -> int:
        """Retourne le nombre de lignes d'une table."""
        ...
