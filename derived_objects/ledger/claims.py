"""
Per-parent claim ledger.

Each parent carries a sparse set of claim records keyed by derived address.
The ledger is a membership oracle, not a directory: it answers "was this
address ever claimed here?" and holds an optional stashed identifier per
record, but it cannot list its children.

Record states:
    ABSENT          -> no record
    CLAIMED_LIVE    -> record with no stash
    CLAIMED_STASHED -> record holding a restored identifier

Records are never removed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from derived_objects.identity import Address, UID
from derived_objects.ledger.store import AttachedStore, InMemoryAttachedStore

logger = logging.getLogger(__name__)


class ClaimState(Enum):
    ABSENT = "absent"
    CLAIMED_LIVE = "claimed-live"
    CLAIMED_STASHED = "claimed-stashed"


@dataclass(frozen=True)
class Claimed:
    """Attached-store field key for a claim record."""

    address: Address

    def __repr__(self) -> str:
        return f"Claimed({self.address.hex()})"


@dataclass
class ClaimRecord:
    stashed: Optional[UID] = None

    @property
    def state(self) -> ClaimState:
        if self.stashed is None:
            return ClaimState.CLAIMED_LIVE
        return ClaimState.CLAIMED_STASHED


class ClaimLedger:
    """Claim records attached to one owner in an ``AttachedStore``."""

    def __init__(self, owner: Address, store: Optional[AttachedStore] = None) -> None:
        self.owner = owner
        self.store: AttachedStore = store if store is not None else InMemoryAttachedStore()

    @property
    def claim_count(self) -> int:
        """Claim records held for ``owner`` in the store, whoever wrote them."""
        return self.store.field_count(self.owner, Claimed)

    def contains(self, address: Address) -> bool:
        return self.store.exists(self.owner, Claimed(address))

    def record(self, address: Address) -> Optional[ClaimRecord]:
        """Return the mutable record for ``address``, or None when absent."""
        if not self.contains(address):
            return None
        return self.store.borrow_mut(self.owner, Claimed(address))

    def state(self, address: Address) -> ClaimState:
        record = self.record(address)
        if record is None:
            return ClaimState.ABSENT
        return record.state

    def record_claim(self, address: Address) -> ClaimRecord:
        """Create a CLAIMED_LIVE record. Fails if any record already exists."""
        record = ClaimRecord()
        self.store.insert(self.owner, Claimed(address), record)
        logger.debug(f"Ledger {self.owner.hex()} recorded claim {address.hex()}")
        return record

    def stash(self, address: Address, uid: UID) -> None:
        """Move an existing record to CLAIMED_STASHED holding ``uid``."""
        record: ClaimRecord = self.store.borrow_mut(self.owner, Claimed(address))
        if record.stashed is not None:
            raise ValueError(f"claim {address.hex()} already holds a stashed identifier")
        record.stashed = uid
        logger.debug(f"Ledger {self.owner.hex()} stashed {uid.address.hex()}")

    def take_stash(self, address: Address) -> UID:
        """Remove and return the stashed identifier, leaving CLAIMED_LIVE."""
        record: ClaimRecord = self.store.borrow_mut(self.owner, Claimed(address))
        if record.stashed is None:
            raise ValueError(f"claim {address.hex()} holds no stashed identifier")
        uid, record.stashed = record.stashed, None
        return uid

    def __repr__(self) -> str:
        return f"ClaimLedger(owner={self.owner.hex()}, claims={self.claim_count})"
