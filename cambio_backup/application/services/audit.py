"""
Ecriture dans le journal systeme.

Le journal est en ecriture seule: un echec d'ecriture est trace
dans les logs applicatifs et n'affecte jamais l'operation.
"""

from typing import Any, Dict, Optional

import structlog

from cambio_backup.domain.ports.system_log import COMPONENT_BACKUP, SystemLogSink

logger = structlog.get_logger(__name__)


def record_event(
    sink: Optional[SystemLogSink],
    level: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    user_id: Optional[str] = None,
) -> bool:
    """
    Ajoute une entree au journal systeme du composant Backup.

    Returns:
        True si l'entree a ete ecrite.
    """
    if sink is None:
        return False

    try:
        sink.write(level, COMPONENT_BACKUP, message, details or {}, user_id)
        return True
    except Exception as e:
        logger.warning("system_log_write_failed", message=message, error=str(e))
        return False
