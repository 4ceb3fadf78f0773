"""
Modeles SQLAlchemy du moteur de sauvegarde.

Tables:
-------
- database_backups: Catalogue des backups (une ligne par fichier)
- backup_configurations: Cadences de backup automatique
"""
from sqlalchemy import JSON, BigInteger, Boolean, Column, DateTime, Index, Integer, String, Text

from cambio_backup.infrastructure.persistence.models.base import Base, utc_now


class DatabaseBackup(Base):
    """
    Table database_backups - Catalogue des backups.

    Invariant: une ligne existe si et seulement si le fichier existe.

    Colonnes:
        backup_id: Identifiant triable du backup (unique)
        backup_type: manual, automatic, pre-restore-safety, imported
        file_path: Nom du fichier dans le repertoire de backup
        file_size: Taille du fichier en octets
        tables_included: Liste JSON des tables presentes
    """
    __tablename__ = "database_backups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    backup_id = Column(String(100), unique=True, nullable=False, index=True)
    backup_type = Column(String(30), nullable=False)
    description = Column(Text, nullable=True)
    user_id = Column(String(100), nullable=True)
    file_path = Column(String(500), nullable=False)
    total_records = Column(Integer, nullable=False, default=0)
    file_size = Column(BigInteger, nullable=False, default=0)
    tables_included = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default="completed")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        Index('idx_database_backups_created', 'created_at'),
        Index('idx_database_backups_type', 'backup_type'),
    )


class BackupConfiguration(Base):
    """
    Table backup_configurations - Cadences de backup automatique.

    Colonnes:
        schedule_type: daily, weekly, monthly
        schedule_time: Heure locale "HH:MM"
        schedule_days: Jours (0=dimanche) pour weekly
        schedule_date: Jour du mois pour monthly
        last_run_status: scheduled, running, success, error
    """
    __tablename__ = "backup_configurations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    enabled = Column(Boolean, nullable=False, default=True)
    schedule_type = Column(String(20), nullable=False, default="daily")
    schedule_time = Column(String(5), nullable=False, default="02:00")
    schedule_days = Column(JSON, nullable=False, default=list)
    schedule_date = Column(Integer, nullable=True)
    retention_days = Column(Integer, nullable=False, default=30)
    max_backups = Column(Integer, nullable=False, default=10)
    last_run_at = Column(DateTime(timezone=True), nullable=True)
    last_run_status = Column(String(20), nullable=True)
    next_run_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    __table_args__ = (
        Index('idx_backup_configurations_enabled', 'enabled'),
    )
