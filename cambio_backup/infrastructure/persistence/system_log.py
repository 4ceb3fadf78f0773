"""
SQLAlchemySystemLogSink - Adapter SQLAlchemy pour le journal systeme.

Implemente le port SystemLogSink avec la table system_logs.
Les entrees ne sont jamais modifiees ni supprimees par le moteur.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import desc

from cambio_backup.domain.ports.system_log import SystemLogSink
from cambio_backup.infrastructure.persistence.database import DatabaseManager
from cambio_backup.infrastructure.persistence.models import SystemLog


class SQLAlchemySystemLogSink(SystemLogSink):
    """Journal systeme en base."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def write(
        self,
        level: str,
        component: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None,
    ) -> None:
        with self._db.get_session() as session:
            session.add(
                SystemLog(
                    level=level,
                    component=component,
                    message=message,
                    details=details,
                    user_id=user_id,
                )
            )

    def recent(self, component: Optional[str] = None, limit: int = 50) -> List[Dict[str, Any]]:
        """Dernieres entrees du journal (les plus recentes d'abord)."""
        with self._db.get_session() as session:
            query = session.query(SystemLog)
            if component:
                query = query.filter(SystemLog.component == component)
            rows = query.order_by(desc(SystemLog.id)).limit(limit).all()
            return [
                {
                    "level": row.level,
                    "component": row.component,
                    "message": row.message,
                    "details": row.details,
                    "user_id": row.user_id,
                    "created_at": row.created_at,
                }
                for row in rows
            ]
