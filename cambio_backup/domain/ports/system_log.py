"""
Port SystemLogSink - Journal systeme en ecriture seule.

Chaque operation sensible (creation, restauration, suppression,
import, execution planifiee) y laisse une trace consultable
depuis le dashboard.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

COMPONENT_BACKUP = "Backup"


class SystemLogSink(ABC):
    """
    Interface du journal systeme.

    Implementee par SQLAlchemySystemLogSink.
    """

    @abstractmethod
    def write(
        self,
        level: str,
        component: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None,
    ) -> None:
        """
        Ajoute une entree au journal.

        Args:
            level: info, success, warning ou error.
            component: Composant emetteur (ex: "Backup").
            message: Message lisible.
            details: Details structures (JSON).
            user_id: Utilisateur concerne.
        """
        ...
