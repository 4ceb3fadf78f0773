"""
Gestionnaire de base de donnees.

Connection Pooling:
-------------------
Pour PostgreSQL, DatabaseManager utilise un pool de connexions:
- pool_size=5: Connexions maintenues en permanence
- max_overflow=10: Connexions temporaires supplementaires
- pool_recycle=1800: Recyclage toutes les 30 min (evite timeout)
- pool_pre_ping=True: Verification avant utilisation

SQLite (tests, poste local) utilise le pool par defaut du dialecte,
avec les cles etrangeres activees (PRAGMA foreign_keys=ON).
"""
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from sqlalchemy import MetaData, Table, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from cambio_backup.infrastructure.persistence.models import Base


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """Gestionnaire de connexion a la base de donnees."""

    def __init__(self, database_url: str, echo: bool = False, metadata: Optional[MetaData] = None):
        """
        Initialise la connexion a la base de donnees.

        Args:
            database_url: URL SQLAlchemy (postgresql://..., sqlite:///...).
            echo: Trace SQL.
            metadata: Schema des tables (defaut: modeles du projet).
        """
        self.metadata = metadata if metadata is not None else Base.metadata

        options: Dict = {"echo": echo}
        is_sqlite = make_url(database_url).get_backend_name() == "sqlite"
        if is_sqlite:
            options["connect_args"] = {"check_same_thread": False}
        else:
            options.update(
                pool_pre_ping=True,
                pool_size=5,
                max_overflow=10,
                pool_timeout=30,
                pool_recycle=1800,
            )

        self.engine = create_engine(database_url, **options)
        if is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

    def create_tables(self) -> None:
        """Cree toutes les tables si elles n'existent pas"""
        self.metadata.create_all(self.engine)

    def table(self, name: str) -> Table:
        """
        Retourne la table SQLAlchemy Core d'un nom.

        Raises:
            KeyError: Si la table n'est pas declaree.
        """
        table = self.metadata.tables.get(name)
        if table is None:
            raise KeyError(f"Table inconnue: {name}")
        return table

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """Context manager pour les sessions avec gestion automatique des transactions"""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """Ferme les connexions du pool."""
        self.engine.dispose()
