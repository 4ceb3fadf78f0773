"""
Fixtures des tests d'integration (SQLite + fichiers locaux).
"""

import pytest

from cambio_backup.infrastructure.container import Container


@pytest.fixture
def container(backup_settings, seeded_db) -> Container:
    """Container complet sur la base SQLite remplie, sans scheduler."""
    container = Container.create(backup_settings, db_manager=seeded_db)
    container.startup(start_scheduler=False)
    yield container
    container.scheduler.stop(wait=False)


@pytest.fixture
def service(container):
    return container.backup_service
