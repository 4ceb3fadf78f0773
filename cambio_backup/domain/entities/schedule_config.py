"""
ScheduleConfig Entity - Configuration de backup automatique.

Responsabilite unique:
----------------------
Decrire une cadence (daily/weekly/monthly) et suivre ses executions.

Cycle de vie:
-------------
Idle -> Scheduled -> Running -> (Success | Error) -> Scheduled
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from cambio_backup.domain.exceptions import SchedulingError

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


class CadenceType(Enum):
    """Cadences supportees."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def from_string(cls, value: str) -> "CadenceType":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise SchedulingError(f"Type de cadence non supporte: '{value}'") from None


class RunStatus(Enum):
    """Statut de la derniere execution."""

    SCHEDULED = "scheduled"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class ScheduleConfig:
    """
    Entite ScheduleConfig.

    Attributes:
        name: Nom affiche.
        cadence_type: daily, weekly ou monthly.
        trigger_time: Heure locale "HH:MM".
        id: Identifiant en base.
        description: Description reprise dans les backups generes.
        enabled: False pour suspendre la cadence.
        days_of_week: Jours pour weekly (0=dimanche ... 6=samedi).
        day_of_month: Jour pour monthly (1-31).
        retention_days: Retention des backups generes.
        max_snapshots: Nombre maximum de backups a conserver.
        last_run_at: Debut de la derniere execution.
        last_run_status: Statut de la derniere execution.
        next_run_at: Estimation de la prochaine execution.
    """

    name: str
    cadence_type: CadenceType = CadenceType.DAILY
    trigger_time: str = "02:00"
    id: Optional[int] = None
    description: str = ""
    enabled: bool = True
    days_of_week: list[int] = field(default_factory=list)
    day_of_month: Optional[int] = None
    retention_days: int = 30
    max_snapshots: int = 10
    last_run_at: Optional[datetime] = None
    last_run_status: Optional[RunStatus] = None
    next_run_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Valide la configuration apres initialisation."""
        if isinstance(self.cadence_type, str):
            self.cadence_type = CadenceType.from_string(self.cadence_type)
        if isinstance(self.last_run_status, str):
            self.last_run_status = RunStatus(self.last_run_status)
        self._validate()

    def _validate(self) -> None:
        if not self.name or not self.name.strip():
            raise SchedulingError("Le nom de la configuration est obligatoire", self.id)

        hour, minute = self._parse_time(self.trigger_time)
        if hour > 23 or minute > 59:
            raise SchedulingError(f"Heure invalide: '{self.trigger_time}'", self.id)

        for day in self.days_of_week:
            if not isinstance(day, int) or not 0 <= day <= 6:
                raise SchedulingError(f"Jour de semaine invalide: {day!r}", self.id)

        if self.day_of_month is not None and not 1 <= self.day_of_month <= 31:
            raise SchedulingError(f"Jour du mois invalide: {self.day_of_month}", self.id)

        if self.retention_days < 0:
            raise SchedulingError("retention_days doit etre >= 0", self.id)
        if self.max_snapshots < 1:
            raise SchedulingError("max_snapshots doit etre >= 1", self.id)

    def _parse_time(self, value: str) -> tuple[int, int]:
        match = _TIME_PATTERN.match(str(value or "").strip())
        if not match:
            raise SchedulingError(f"Heure invalide: '{value}' (format HH:MM)", self.id)
        return int(match.group(1)), int(match.group(2))

    @property
    def hour(self) -> int:
        return self._parse_time(self.trigger_time)[0]

    @property
    def minute(self) -> int:
        return self._parse_time(self.trigger_time)[1]

    @property
    def is_running(self) -> bool:
        return self.last_run_status is RunStatus.RUNNING

    def mark_scheduled(self, next_run_at: Optional[datetime]) -> None:
        self.last_run_status = self.last_run_status or RunStatus.SCHEDULED
        self.next_run_at = next_run_at

    def mark_running(self, now: datetime) -> None:
        self.last_run_at = now
        self.last_run_status = RunStatus.RUNNING

    def mark_success(self, now: datetime, next_run_at: Optional[datetime] = None) -> None:
        self.last_run_at = now
        self.last_run_status = RunStatus.SUCCESS
        self.next_run_at = next_run_at

    def mark_error(self, now: datetime, next_run_at: Optional[datetime] = None) -> None:
        self.last_run_at = now
        self.last_run_status = RunStatus.ERROR
        self.next_run_at = next_run_at
