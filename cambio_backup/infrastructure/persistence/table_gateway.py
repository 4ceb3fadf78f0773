"""
SQLAlchemyTableGateway - Adapter SQLAlchemy Core pour les tables metier.

Implemente le port TableGateway.
Responsabilite unique: lecture et reecriture complete d'une table par son nom.

Les lignes d'un backup arrivent du JSON (dates et decimaux en texte):
elles sont reconverties selon le type de chaque colonne. Les colonnes
calculees sont ignorees; une cle absente du schema fait echouer la
table. Apres reinsertion des cles d'origine, une sequence PostgreSQL
est realignee sur la plus grande cle.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, Select, Table, delete, func, insert, select, update
from sqlalchemy.orm import Session

from cambio_backup.domain.ports.table_gateway import TableGateway
from cambio_backup.infrastructure.persistence.database import DatabaseManager

_TRUE_VALUES = {"true", "1", "t", "yes", "y"}


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))


def coerce_value(column: Column, value: Any) -> Any:
    """
    Convertit une valeur JSON vers le type Python de la colonne.

    Les valeurs deja du bon type, ou de type non convertible, sont
    retournees telles quelles.
    """
    if value is None:
        return None
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value

    if isinstance(value, python_type) and not (python_type is date and isinstance(value, datetime)):
        return value

    try:
        if python_type is datetime and isinstance(value, str):
            return _parse_datetime(value)
        if python_type is date:
            if isinstance(value, datetime):
                return value.date()
            if isinstance(value, str):
                return _parse_datetime(value).date() if "T" in value else date.fromisoformat(value)
        if python_type is Decimal and isinstance(value, (int, float, str)):
            return Decimal(str(value))
        if python_type is bool and isinstance(value, str):
            return value.strip().lower() in _TRUE_VALUES
        if python_type is int and isinstance(value, (float, str, Decimal)):
            return int(value)
        if python_type is float and isinstance(value, (int, str, Decimal)):
            return float(value)
        if python_type is str and isinstance(value, (int, float, Decimal)):
            return str(value)
    except (ValueError, InvalidOperation) as e:
        raise ValueError(f"Valeur invalide pour {column.table.name}.{column.name}: {value!r}") from e

    return value


def coerce_row(table: Table, row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Prepare une ligne pour insertion (types, colonnes calculees exclues).

    Raises:
        ValueError: Si la ligne contient des colonnes absentes de la table.
    """
    unknown = sorted(set(row) - set(table.columns.keys()))
    if unknown:
        raise ValueError(f"Colonnes inconnues pour {table.name}: {', '.join(unknown)}")

    values = {}
    for column in table.columns:
        if column.computed is not None or column.name not in row:
            continue
        values[column.name] = coerce_value(column, row[column.name])
    return values


def sequence_reset_statement(table: Table, dialect_name: str) -> Optional[Select]:
    """
    Requete de realignement de la sequence d'une cle entiere auto-incrementee.

    Returns:
        None hors PostgreSQL ou sans cle auto-incrementee.
    """
    pk = table.autoincrement_column
    if dialect_name != "postgresql" or pk is None:
        return None
    current_max = select(func.max(pk)).scalar_subquery()
    return select(
        func.setval(
            func.pg_get_serial_sequence(table.name, pk.name),
            func.coalesce(current_max, 0) + 1,
            False,
        )
    )


def _reset_sequence(session: Session, table: Table) -> None:
    statement = sequence_reset_statement(table, session.get_bind().dialect.name)
    if statement is not None:
        session.execute(statement)

class SQLAlchemyTableGateway(TableGateway):
    """
    Gateway SQLAlchemy pour les tables principales.

    Attributes:
        db: DatabaseManager pour les sessions et le schema.
    """

    def __init__(self, db: DatabaseManager):
        """
        Initialise le gateway.

        Args:
            db: Instance DatabaseManager.
        """
        self._db = db

    def fetch_all(self, table: str, order_by: str = "id") -> List[Dict[str, Any]]:
        """Retourne toutes les lignes, triees par order_by si la colonne existe."""
        target = self._db.table(table)
        query = select(target)
        if order_by in target.c:
            query = query.order_by(target.c[order_by].asc())

        with self._db.get_session() as session:
            return [dict(row) for row in session.execute(query).mappings()]

    def replace_rows(self, table: str, rows: List[Dict[str, Any]]) -> int:
        """
        Vide la table puis reinsere les lignes, dans une seule transaction.

        Un echec annule aussi la suppression.

        Raises:
            ValueError: Si une ligne a une colonne inconnue (table intacte).
        """
        target = self._db.table(table)
        values = [coerce_row(target, row) for row in rows]

        with self._db.get_session() as session:
            session.execute(delete(target))
            if not values:
                return 0
            if len({frozenset(v) for v in values}) == 1:
                session.execute(insert(target), values)
            else:
                # Colonnes heterogenes (backup importe): insertion ligne par ligne
                for value in values:
                    session.execute(insert(target).values(**value))
            _reset_sequence(session, target)
        return len(values)

    def upsert_rows(self, table: str, rows: List[Dict[str, Any]], key: str = "id") -> int:
        """
        Met a jour les lignes existantes et insere les nouvelles.

        Raises:
            ValueError: Si une ligne n'a pas de cle ou a une colonne inconnue.
        """
        target = self._db.table(table)
        pk = target.c[key]

        with self._db.get_session() as session:
            for row in rows:
                values = coerce_row(target, row)
                if values.get(key) is None:
                    raise ValueError(f"Ligne sans cle '{key}' dans {table}")

                exists = session.execute(select(pk).where(pk == values[key])).first()
                if exists is None:
                    session.execute(insert(target).values(**values))
                    continue

                changes = {name: value for name, value in values.items() if name != key}
                if changes:
                    session.execute(update(target).where(pk == values[key]).values(**changes))
            _reset_sequence(session, target)
        return len(rows)

    def count_rows(self, table: str) -> int:
        target = self._db.table(table)
        with self._db.get_session() as session:
            return session.execute(select(func.count()).select_from(target)).scalar_one()
