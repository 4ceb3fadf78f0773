"""
BackupScheduler - Planificateur de sauvegardes.

Responsabilite unique:
----------------------
Planifier et executer les sauvegardes automatiques definies
dans backup_configurations.

Fonctionnement:
---------------
- Un job APScheduler par configuration active (CronTrigger, heure locale)
- Rechargement periodique des configurations (IntervalTrigger)
- Une configuration ne se chevauche jamais elle-meme (max_instances=1);
  deux configurations differentes peuvent s'executer en parallele
- Une execution en erreur est tracee et n'affecte ni le processus
  ni les declenchements suivants

Usage:
------
    scheduler = BackupScheduler(settings, service, configs)
    scheduler.start()  # Demarre en arriere-plan
    scheduler.stop()   # Arrete le scheduler
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from cambio_backup.application.use_cases import BackupResult
from cambio_backup.domain.entities.schedule_config import RunStatus, ScheduleConfig
from cambio_backup.domain.entities.snapshot import SnapshotType
from cambio_backup.domain.exceptions import SchedulingError
from cambio_backup.domain.ports.schedule_repository import ScheduleConfigRepository
from cambio_backup.domain.services.cadence import cron_fields, describe, estimate_next_run
from cambio_backup.infrastructure.backup.config import BackupSettings
from cambio_backup.infrastructure.backup.service import BackupService
from cambio_backup.infrastructure.logging import bind_run_context, clear_run_context, get_logger

logger = get_logger(__name__)

JOB_PREFIX = "backup_config_"
RELOAD_JOB_ID = "backup_configs_reload"


def job_id(config_id: int) -> str:
    return f"{JOB_PREFIX}{config_id}"


class BackupScheduler:
    """
    Planificateur de sauvegardes automatiques.

    Execute les backups selon les cadences configurees.
    """

    def __init__(
        self,
        settings: BackupSettings,
        service: BackupService,
        configs: ScheduleConfigRepository,
        scheduler: Optional[BaseScheduler] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialise le scheduler.

        Args:
            settings: Configuration des sauvegardes.
            service: Service de sauvegarde.
            configs: Repository des configurations de cadence.
            scheduler: Scheduler APScheduler (defaut: BackgroundScheduler).
            clock: Horloge UTC (tests).
        """
        self._settings = settings
        self._service = service
        self._configs = configs
        self._timezone = settings.timezone
        self._scheduler = scheduler or BackgroundScheduler(timezone=self._timezone)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._scheduled: Dict[int, ScheduleConfig] = {}
        self._running = False
        self._initialized = False

    def start(self) -> None:
        """
        Demarre le scheduler.

        Charge les configurations actives puis lance le thread APScheduler.
        """
        if self._running:
            logger.warning("scheduler_already_running")
            return

        self.reload()

        self._scheduler.add_job(
            self.reload,
            trigger=IntervalTrigger(minutes=self._settings.backup_reload_interval_minutes),
            id=RELOAD_JOB_ID,
            name="Rechargement des configurations de backup",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

        self._scheduler.start()
        self._running = True

        logger.info(
            "scheduler_started",
            scheduled_jobs=len(self._scheduled),
            timezone=self._settings.business_timezone,
        )

    initialize = start

    def stop(self, wait: bool = True) -> None:
        """Arrete le scheduler."""
        if not self._running:
            return

        self._scheduler.shutdown(wait=wait)
        self._running = False
        self._initialized = False

        logger.info("scheduler_stopped")

    def reload(self) -> int:
        """
        Recharge les configurations actives et reconstruit tous les jobs.

        Une configuration invalide est ignoree (loggee), les autres sont
        planifiees. Si la lecture echoue, les jobs existants sont conserves.

        Returns:
            Nombre de configurations planifiees.
        """
        try:
            configs = self._configs.list_enabled()
        except Exception as e:
            logger.error("schedule_configs_load_failed", error=str(e))
            return len(self._scheduled)

        for job in self._scheduler.get_jobs():
            if job.id.startswith(JOB_PREFIX):
                self._scheduler.remove_job(job.id)
        self._scheduled = {}

        for config in configs:
            try:
                self._schedule(config)
            except SchedulingError as e:
                logger.error("schedule_config_invalid", config_id=config.id, name=config.name, error=e.message)

        self._initialized = True
        logger.info("schedule_configs_loaded", scheduled=len(self._scheduled), enabled=len(configs))
        return len(self._scheduled)

    def build_trigger(self, config: ScheduleConfig) -> CronTrigger:
        """
        Construit le CronTrigger d'une configuration (fuseau metier).

        Raises:
            SchedulingError: Si la cadence ne produit pas de trigger valide.
        """
        try:
            return CronTrigger(timezone=self._timezone, **cron_fields(config))
        except ValueError as e:
            raise SchedulingError(f"Trigger invalide: {e}", config.id) from e

    def next_run_for(self, config: ScheduleConfig, trigger: Optional[CronTrigger] = None) -> Optional[datetime]:
        """
        Prochaine execution d'une configuration.

        Mode "cadence": prochain declenchement reel du trigger.
        Mode "estimate": meme heure le lendemain.
        """
        now = self._clock().astimezone(self._timezone)
        if self._settings.backup_next_run_mode == "estimate":
            return estimate_next_run(now, config.hour, config.minute)
        trigger = trigger or self.build_trigger(config)
        return trigger.get_next_fire_time(None, now)

    def _schedule(self, config: ScheduleConfig) -> None:
        trigger = self.build_trigger(config)

        self._scheduler.add_job(
            self._run_scheduled_backup,
            trigger=trigger,
            args=[config.id],
            id=job_id(config.id),
            name=f"Backup {config.name}",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

        next_run = self.next_run_for(config, trigger)
        config.mark_scheduled(next_run)
        self._scheduled[config.id] = config

        try:
            self._configs.set_next_run(config.id, next_run)
        except Exception as e:
            logger.warning("schedule_next_run_update_failed", config_id=config.id, error=str(e))

        logger.info(
            "backup_job_scheduled",
            config_id=config.id,
            name=config.name,
            cadence=describe(config),
            next_run=next_run.isoformat() if next_run else None,
        )

    def _run_scheduled_backup(self, config_id: int, force: bool = False) -> Optional[BackupResult]:
        """
        Execute le backup planifie d'une configuration.

        Args:
            config_id: Configuration a executer.
            force: Execute meme si la configuration est desactivee.

        Returns:
            BackupResult, ou None si la configuration est introuvable ou inactive.
        """
        try:
            config = self._configs.get(config_id)
        except Exception as e:
            logger.error("scheduled_backup_config_load_failed", config_id=config_id, error=str(e))
            return None

        if config is None or not (config.enabled or force):
            logger.warning("scheduled_backup_skipped", config_id=config_id)
            return None

        bind_run_context(config_id=config_id)
        try:
            return self._execute(config)
        finally:
            clear_run_context()

    def _execute(self, config: ScheduleConfig) -> BackupResult:
        started_at = self._clock()
        logger.info("scheduled_backup_started", name=config.name)
        self._mark(config, RunStatus.RUNNING, started_at)

        description = config.description or f"Backup automatique: {config.name}"
        result = self._service.create_backup(SnapshotType.AUTOMATIC, description, "system")

        try:
            next_run = self.next_run_for(config)
        except SchedulingError as e:
            logger.warning("schedule_next_run_failed", error=e.message)
            next_run = None

        if not result.success:
            logger.error("scheduled_backup_failed", error=result.error)
            self._mark(config, RunStatus.ERROR, self._clock(), next_run)
            return result

        logger.info(
            "scheduled_backup_completed",
            backup_id=result.snapshot_id,
            total_records=result.metadata.get("totalRecords"),
        )
        self._mark(config, RunStatus.SUCCESS, self._clock(), next_run)

        # Pas de nettoyage pour une retention de 0 jour
        if self._settings.backup_cleanup_after_run and config.retention_days > 0:
            self._service.cleanup_old_backups(config.retention_days)

        return result

    def _mark(
        self,
        config: ScheduleConfig,
        status: RunStatus,
        at: datetime,
        next_run: Optional[datetime] = None,
    ) -> None:
        if status is RunStatus.RUNNING:
            config.mark_running(at)
        elif status is RunStatus.SUCCESS:
            config.mark_success(at, next_run)
        else:
            config.mark_error(at, next_run)

        try:
            self._configs.mark_run(config.id, status, at, next_run)
        except Exception as e:
            logger.error("schedule_run_status_update_failed", status=status.value, error=str(e))

    def run_now(self, config_id: Optional[int] = None) -> dict:
        """
        Execute un backup immediatement.

        Args:
            config_id: Configuration a executer (historique mis a jour).
                Sans config_id, cree un backup manuel.

        Returns:
            Resultat du backup.
        """
        if config_id is None:
            result = self._service.create_backup(SnapshotType.MANUAL, "Backup manuel (scheduler)", "system")
            return result.to_dict()

        result = self._run_scheduled_backup(config_id, force=True)
        if result is None:
            return BackupResult(success=False, error=f"Configuration introuvable: {config_id}").to_dict()
        return result.to_dict()

    def status(self) -> Dict[str, Any]:
        """
        Etat du scheduler.

        Returns:
            Dict avec initialized, running, scheduled_jobs et le detail des jobs.
        """
        jobs: List[Dict[str, Any]] = []
        for config_id, config in self._scheduled.items():
            job = self._scheduler.get_job(job_id(config_id))
            next_run = getattr(job, "next_run_time", None) if job else None
            next_run = next_run or config.next_run_at
            jobs.append({
                "config_id": config_id,
                "name": config.name,
                "cadence": describe(config),
                "next_run": next_run.isoformat() if next_run else None,
                "enabled": config.enabled,
            })

        return {
            "initialized": self._initialized,
            "running": self._running,
            "scheduled_jobs": len(jobs),
            "jobs": jobs,
        }

    @property
    def is_running(self) -> bool:
        """Retourne True si le scheduler est actif."""
        return self._running

    @property
    def next_run(self) -> Optional[datetime]:
        """Retourne la prochaine execution planifiee, toutes configurations confondues."""
        runs = [config.next_run_at for config in self._scheduled.values() if config.next_run_at]
        return min(runs) if runs else None
