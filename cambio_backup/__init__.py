"""
Casa de Cambios - Moteur de sauvegarde/restauration

Structure:
    - domain/: Coeur metier (entites, value objects, ports, services)
    - application/: Use cases (creation, restauration, verification, retention)
    - infrastructure/: Adapters (SQLAlchemy, fichiers JSON, APScheduler)
"""

__version__ = "1.0.0"
