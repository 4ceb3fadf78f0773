"""
Infrastructure Layer - Adapters du moteur de sauvegarde.

Cette couche contient les implementations concretes des ports definis
dans le domaine. Elle gere les interactions avec:
- Base de donnees (SQLAlchemy: tables metier, catalogue, cadences, journal)
- Systeme de fichiers (fichiers JSON de backup)
- APScheduler (backups automatiques)
"""

from cambio_backup.infrastructure.container import Container

__all__ = ["Container"]
