"""
Service de cadence - Traduction d'une ScheduleConfig en regle recurrente.

Les jours de semaine suivent la convention cron (0=dimanche).
Le resultat est exprime en champs cron nommes, independants
de la librairie de planification.
"""

from datetime import datetime, timedelta
from typing import Dict, Optional

from cambio_backup.domain.entities.schedule_config import CadenceType, ScheduleConfig
from cambio_backup.domain.exceptions import SchedulingError

DAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")
DEFAULT_WEEKLY_DAYS = [0]
DEFAULT_MONTH_DAY = 1


def cron_fields(config: ScheduleConfig) -> Dict[str, str]:
    """
    Construit les champs cron d'une configuration.

    Args:
        config: Configuration de cadence.

    Returns:
        Dict avec minute, hour, day, day_of_week.

    Raises:
        SchedulingError: Si la cadence n'est pas supportee.

    Example:
        >>> cron_fields(ScheduleConfig(name="nuit", trigger_time="02:30"))
        {'minute': '30', 'hour': '2', 'day': '*', 'day_of_week': '*'}
    """
    fields = {
        "minute": str(config.minute),
        "hour": str(config.hour),
        "day": "*",
        "day_of_week": "*",
    }

    if config.cadence_type is CadenceType.DAILY:
        return fields

    if config.cadence_type is CadenceType.WEEKLY:
        days = sorted(set(config.days_of_week or DEFAULT_WEEKLY_DAYS))
        fields["day_of_week"] = ",".join(DAY_NAMES[day] for day in days)
        return fields

    if config.cadence_type is CadenceType.MONTHLY:
        fields["day"] = str(config.day_of_month or DEFAULT_MONTH_DAY)
        return fields

    raise SchedulingError(f"Cadence non supportee: {config.cadence_type}", config.id)


def describe(config: ScheduleConfig) -> str:
    """Expression cron lisible (minute heure jour mois jour_semaine)."""
    fields = cron_fields(config)
    if config.cadence_type is CadenceType.WEEKLY:
        days = sorted(set(config.days_of_week or DEFAULT_WEEKLY_DAYS))
        day_of_week = ",".join(str(day) for day in days)
    else:
        day_of_week = "*"
    return f"{fields['minute']} {fields['hour']} {fields['day']} * {day_of_week}"


def estimate_next_run(now: datetime, hour: Optional[int] = None, minute: Optional[int] = None) -> datetime:
    """
    Estimation simplifiee: meme heure, le lendemain.

    Sans hour/minute, retourne now + 24h.
    """
    tomorrow = now + timedelta(days=1)
    if hour is None or minute is None:
        return tomorrow
    return tomorrow.replace(hour=hour, minute=minute, second=0, microsecond=0)
