"""
Logging Infrastructure - Logging structure avec structlog.

Usage:
------
    from cambio_backup.infrastructure.logging import get_logger

    logger = get_logger(__name__)
    logger.info("restore_started", backup_id="...", initiator="admin")
"""

from cambio_backup.infrastructure.logging.config import (
    bind_run_context,
    clear_run_context,
    configure_logging,
    get_logger,
)

__all__ = ["configure_logging", "get_logger", "bind_run_context", "clear_run_context"]
