"""
Modele SQLAlchemy du journal systeme.

Les ecritures du moteur de sauvegarde utilisent component="Backup".
"""
from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, Text

from cambio_backup.infrastructure.persistence.models.base import Base, utc_now


class SystemLog(Base):
    """
    Table system_logs - Journal des evenements applicatifs.

    Colonnes:
        level: info, success, warning, error
        component: Composant emetteur (ex: Backup)
        details: Contexte JSON de l'evenement
    """
    __tablename__ = "system_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    level = Column(String(20), nullable=False)
    component = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    details = Column(JSON, nullable=True)
    user_id = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        Index('idx_system_logs_component', 'component', 'created_at'),
    )
