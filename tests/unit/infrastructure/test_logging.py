"""
Tests unitaires pour la configuration du logging.
"""

import io
import json
import logging

import pytest
import structlog

from cambio_backup.infrastructure.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
    get_logger,
)
from cambio_backup.infrastructure.logging.config import HANDLER_NAME


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    clear_run_context()
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)


def _lines(stream: io.StringIO):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


class TestConfigureLogging:
    """Tests pour configure_logging."""

    def test_json_output(self):
        """Le mode JSON ecrit un objet par ligne avec le service."""
        stream = io.StringIO()
        configure_logging(json_logs=True, stream=stream)

        get_logger("tests.json").info("backup_completed", backup_id="b1")

        entry = _lines(stream)[-1]
        assert entry["event"] == "backup_completed"
        assert entry["backup_id"] == "b1"
        assert entry["service"] == "cambio-backup"
        assert entry["level"] == "info"

    def test_stdlib_logs_rendered(self):
        """Les logs stdlib passent par le meme rendu JSON."""
        stream = io.StringIO()
        configure_logging(json_logs=True, stream=stream)

        logging.getLogger("tests.stdlib").warning("pool epuise")

        assert _lines(stream)[-1]["event"] == "pool epuise"

    def test_single_handler(self):
        """Un second appel remplace le handler precedent."""
        configure_logging(stream=io.StringIO())
        configure_logging(stream=io.StringIO())

        names = [h.get_name() for h in logging.getLogger().handlers]
        assert names.count(HANDLER_NAME) == 1

    def test_quiet_loggers(self):
        """APScheduler et SQLAlchemy restent au niveau WARNING."""
        configure_logging(log_level="DEBUG", stream=io.StringIO())

        assert logging.getLogger("apscheduler").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


class TestRunContext:
    """Tests pour le contexte d'execution."""

    def test_context_in_logs(self):
        """Le contexte lie apparait dans chaque evenement."""
        stream = io.StringIO()
        configure_logging(json_logs=True, stream=stream)

        bind_run_context(config_id=7)
        get_logger("tests.context").info("scheduled_backup_started")

        assert _lines(stream)[-1]["config_id"] == 7

    def test_bind_replaces_previous_context(self):
        """bind_run_context remplace le contexte precedent."""
        bind_run_context(config_id=1, backup_id="a")
        bind_run_context(config_id=2)

        assert structlog.contextvars.get_contextvars() == {"config_id": 2}

    def test_clear(self):
        """clear_run_context vide le contexte."""
        bind_run_context(config_id=1)
        clear_run_context()

        assert structlog.contextvars.get_contextvars() == {}
