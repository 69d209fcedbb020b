"""
Ledger Module

Claim ledgers attached to parent objects, and the attached store behind them.
"""

from derived_objects.ledger.claims import (
    ClaimLedger,
    ClaimRecord,
    ClaimState,
    Claimed,
)
from derived_objects.ledger.store import (
    AttachedStore,
    AttachedStoreError,
    FieldAlreadyExistsError,
    FieldNotFoundError,
    InMemoryAttachedStore,
)

__all__ = [
    "AttachedStore",
    "AttachedStoreError",
    "ClaimLedger",
    "ClaimRecord",
    "ClaimState",
    "Claimed",
    "FieldAlreadyExistsError",
    "FieldNotFoundError",
    "InMemoryAttachedStore",
]
