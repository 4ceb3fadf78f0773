"""
Port ScheduleConfigRepository - Interface pour les cadences de backup.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from cambio_backup.domain.entities.schedule_config import RunStatus, ScheduleConfig


class ScheduleConfigRepository(ABC):
    """
    Interface Repository pour les configurations de backup automatique.

    Implementee par SQLAlchemyScheduleConfigRepository.
    """

    @abstractmethod
    def list_all(self) -> List[ScheduleConfig]:
        ...

    @abstractmethod
    def list_enabled(self) -> List[ScheduleConfig]:
        """Configurations actives, utilisees par le scheduler."""
        ...

    @abstractmethod
    def get(self, config_id: int) -> Optional[ScheduleConfig]:
        ...

    @abstractmethod
    def create(self, config: ScheduleConfig) -> ScheduleConfig:
        """Cree une configuration et retourne la version persistee."""
        ...

    @abstractmethod
    def update(self, config_id: int, changes: Dict[str, Any]) -> Optional[ScheduleConfig]:
        """Applique des modifications partielles. None si absente."""
        ...

    @abstractmethod
    def delete(self, config_id: int) -> bool:
        ...

    @abstractmethod
    def mark_run(
        self,
        config_id: int,
        status: RunStatus,
        at: datetime,
        next_run_at: Optional[datetime] = None,
    ) -> bool:
        """Enregistre le statut et l'instant de la derniere execution."""
        ...

    @abstractmethod
    def set_next_run(self, config_id: int, next_run_at: Optional[datetime]) -> bool:
        ...
