"""
Services du domaine.
"""

from cambio_backup.domain.services.cadence import cron_fields, describe, estimate_next_run
from cambio_backup.domain.services.reconciliation import (
    ReconciliationStrategy,
    ReplaceReconciliation,
    UpsertReconciliation,
    strategy_for,
)

__all__ = [
    "ReconciliationStrategy",
    "ReplaceReconciliation",
    "UpsertReconciliation",
    "strategy_for",
    "cron_fields",
    "describe",
    "estimate_next_run",
]
