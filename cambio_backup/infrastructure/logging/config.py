"""
Logging Config - Configuration structlog.

Responsabilite unique:
----------------------
Configurer structlog pour le moteur de sauvegarde et le worker.
Les logs stdlib (SQLAlchemy, APScheduler) passent par le meme rendu
que les logs structlog.

Modes:
------
- Development: Pretty print, couleurs si terminal
- Production: JSON, timestamp ISO UTC

Usage:
------
    from cambio_backup.infrastructure.logging import configure_logging, get_logger

    configure_logging(json_logs=True)
    logger = get_logger(__name__)
    logger.info("backup_completed", backup_id="...", size_bytes=2048)
"""

import logging
import sys
from typing import Any, List, Optional, TextIO

import structlog

SERVICE_NAME = "cambio-backup"
HANDLER_NAME = "cambio_backup"

# Librairies trop bavardes au niveau INFO
_QUIET_LOGGERS = ("apscheduler", "sqlalchemy.engine")


def _add_service(_: Any, __: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _pre_chain() -> List[Any]:
    """Processeurs communs aux logs structlog et stdlib."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def _renderer(json_logs: bool, stream: TextIO) -> Any:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def configure_logging(
    json_logs: bool = False,
    log_level: str = "INFO",
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """
    Configure le logging global.

    Un seul handler est installe sur le logger racine; un nouvel appel
    remplace celui du precedent.

    Args:
        json_logs: True pour JSON (production), False pour pretty.
        log_level: Niveau minimum (DEBUG, INFO, WARNING, ERROR).
        stream: Flux de sortie (defaut: stdout).

    Returns:
        Handler installe.
    """
    stream = stream or sys.stdout
    level = getattr(logging, log_level.upper(), logging.INFO)
    pre_chain = _pre_chain()

    structlog.configure(
        processors=pre_chain + [
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(json_logs, stream),
        ],
    )
    handler = logging.StreamHandler(stream)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return handler


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Retourne un logger structure (nom du module en general)."""
    return structlog.get_logger(name)


def bind_run_context(**values: Any) -> None:
    """
    Attache un contexte (ex: config_id, backup_id) aux logs du thread courant.

    Utilise par le scheduler pour correler les logs d'une execution.
    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)


def clear_run_context() -> None:
    structlog.contextvars.clear_contextvars()
