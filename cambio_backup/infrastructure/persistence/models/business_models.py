"""
Modeles SQLAlchemy des tables metier sauvegardees.

Tables (ordre de sauvegarde/restauration):
------------------------------------------
- global_rate: Taux de change global
- collaborators: Collaborateurs (PROTECTED, restaure par upsert)
- clients: Clients
- transactions: Operations de change

Les tables sont independantes (aucune cle etrangere): les
transactions gardent le nom du client et du collaborateur.

Colonnes calculees:
-------------------
transactions.usd_net et transactions.amount_gs sont generees par la base;
elles sont exportees mais jamais reecrites a la restauration.
"""
import uuid

from sqlalchemy import (
    Column,
    Computed,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)

from cambio_backup.infrastructure.persistence.models.base import Base, utc_now


def _uuid() -> str:
    return str(uuid.uuid4())


class GlobalRate(Base):
    """Table global_rate - Taux de change en vigueur."""
    __tablename__ = "global_rate"

    id = Column(String(36), primary_key=True, default=_uuid)
    rate = Column(Numeric(10, 2), nullable=True)       # Historique (PYG)
    cop_rate = Column(Numeric(10, 2), nullable=True)
    bob_rate = Column(Numeric(10, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now)
    updated_by = Column(String(36), nullable=True)


class Collaborator(Base):
    """
    Table collaborators - Collaborateurs et leurs commissions.

    Table PROTECTED: jamais videe par une restauration, les lignes du
    backup sont fusionnees par identifiant.
    """
    __tablename__ = "collaborators"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(Text, nullable=False)
    base_pct = Column(Numeric(5, 2), default=0)
    tx_count = Column(Integer, default=0)
    total_commission_usd = Column(Numeric(12, 2), default=0)
    status = Column(Text, default="active")
    created_at = Column(DateTime(timezone=True), default=utc_now)


class Client(Base):
    """Table clients - Clients de la maison de change."""
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(Text, nullable=False)
    status = Column(Text, default="active")
    total_volume_usd = Column(Numeric(12, 2), default=0)
    created_at = Column(DateTime(timezone=True), default=utc_now)


class Transaction(Base):
    """
    Table transactions - Operations de change.

    Colonnes:
        usd_total: Montant brut en USD
        commission: Commission en USD
        exchange_rate: Taux applique
        usd_net: usd_total - commission (calculee)
        amount_gs: usd_net * exchange_rate en guaranis (calculee)
        idempotency_key: Cle anti-doublon fournie par le client
    """
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_uuid)
    client_name = Column(Text, nullable=True)
    collaborator_name = Column(Text, nullable=True)
    usd_total = Column(Numeric(12, 2), nullable=False)
    commission = Column(Numeric(12, 2), default=0)
    usd_net = Column(Numeric(12, 2), Computed("usd_total - commission", persisted=True))
    exchange_rate = Column(Numeric(10, 2), nullable=False)
    amount_gs = Column(
        Numeric(15, 2),
        Computed("(usd_total - commission) * exchange_rate", persisted=True),
    )
    status = Column(Text, default="completed")
    chat_id = Column(Text, nullable=True)
    idempotency_key = Column(Text, nullable=True)
    created_by = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    __table_args__ = (
        Index('idx_transactions_created_at', 'created_at'),
    )
