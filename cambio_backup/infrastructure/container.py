"""
Container d'injection de dependances.

Ce module fournit un conteneur qui initialise et connecte
tous les composants du moteur de sauvegarde. Aucun singleton
implicite: le processus cree son Container et appelle
startup() / shutdown().
"""

from dataclasses import dataclass
from typing import Optional

from cambio_backup.application.services.snapshot_store import SnapshotStore
from cambio_backup.application.services.table_exporter import TableExporter
from cambio_backup.application.use_cases import (
    CleanupBackupsUseCase,
    CreateBackupUseCase,
    ImportBackupUseCase,
    RestoreBackupUseCase,
    VerifyBackupUseCase,
)
from cambio_backup.infrastructure.backup.config import BackupSettings, get_backup_settings
from cambio_backup.infrastructure.backup.scheduler import BackupScheduler
from cambio_backup.infrastructure.backup.service import BackupService
from cambio_backup.infrastructure.logging import get_logger
from cambio_backup.infrastructure.persistence import (
    DatabaseManager,
    SQLAlchemyCatalogRepository,
    SQLAlchemyScheduleConfigRepository,
    SQLAlchemySystemLogSink,
    SQLAlchemyTableGateway,
)
from cambio_backup.infrastructure.storage import LocalSnapshotStorage

logger = get_logger(__name__)


@dataclass
class Container:
    """
    Conteneur d'injection de dependances.

    Example:
        >>> container = Container.create(get_backup_settings())
        >>> container.startup()
        >>> container.backup_service.create_backup(description="Manuel")
        >>> container.shutdown()
    """

    settings: BackupSettings
    db_manager: DatabaseManager

    # Repositories
    table_gateway: SQLAlchemyTableGateway
    catalog_repository: SQLAlchemyCatalogRepository
    schedule_repository: SQLAlchemyScheduleConfigRepository
    system_log: SQLAlchemySystemLogSink

    # Services
    snapshot_store: SnapshotStore
    backup_service: BackupService
    scheduler: BackupScheduler

    @classmethod
    def create(
        cls,
        settings: Optional[BackupSettings] = None,
        db_manager: Optional[DatabaseManager] = None,
    ) -> "Container":
        """
        Factory pour creer un conteneur avec toutes les dependances.

        Args:
            settings: Configuration (defaut: get_backup_settings()).
            db_manager: DatabaseManager (defaut: cree depuis settings.database_url).

        Returns:
            Container configure avec tous les composants.
        """
        settings = settings or get_backup_settings()
        db_manager = db_manager or DatabaseManager(settings.database_url)

        # Repositories
        table_gateway = SQLAlchemyTableGateway(db_manager)
        catalog_repository = SQLAlchemyCatalogRepository(db_manager)
        schedule_repository = SQLAlchemyScheduleConfigRepository(db_manager)
        system_log = SQLAlchemySystemLogSink(db_manager)

        # Stockage
        snapshot_store = SnapshotStore(
            LocalSnapshotStorage(settings.backup_path),
            catalog_repository,
        )

        # Use Cases
        create_backup = CreateBackupUseCase(
            exporter=TableExporter(table_gateway),
            store=snapshot_store,
            system_log=system_log,
        )
        backup_service = BackupService(
            store=snapshot_store,
            create_backup=create_backup,
            restore_backup=RestoreBackupUseCase(
                store=snapshot_store,
                gateway=table_gateway,
                create_backup=create_backup,
                system_log=system_log,
            ),
            verify_backup=VerifyBackupUseCase(snapshot_store),
            cleanup_backups=CleanupBackupsUseCase(
                snapshot_store,
                retention_days=settings.backup_retention_days,
            ),
            import_backup=ImportBackupUseCase(snapshot_store, system_log=system_log),
            system_log=system_log,
        )

        scheduler = BackupScheduler(settings, backup_service, schedule_repository)

        return cls(
            settings=settings,
            db_manager=db_manager,
            table_gateway=table_gateway,
            catalog_repository=catalog_repository,
            schedule_repository=schedule_repository,
            system_log=system_log,
            snapshot_store=snapshot_store,
            backup_service=backup_service,
            scheduler=scheduler,
        )

    def startup(self, start_scheduler: bool = True) -> None:
        """
        Prepare le processus: tables, repertoire de backup, scheduler.

        Args:
            start_scheduler: False pour un processus sans backups automatiques.
        """
        self.db_manager.create_tables()
        self.snapshot_store.ensure_location()
        if start_scheduler:
            self.scheduler.start()
        logger.info(
            "container_started",
            backup_dir=str(self.settings.backup_path),
            scheduler=self.scheduler.is_running,
        )

    def shutdown(self) -> None:
        """Arrete le scheduler et ferme les connexions."""
        self.scheduler.stop()
        self.db_manager.dispose()
        logger.info("container_stopped")
