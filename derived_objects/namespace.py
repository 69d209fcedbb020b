"""
Derived-object namespace: claim, exists, restore and derive_address.

A parent hands out deterministic child identifiers keyed by arbitrary typed
keys. The child's address is computable off-line with ``derive_address``;
uniqueness is enforced on-line by the parent's claim ledger.

Per (parent, key):

    ABSENT --claim--> CLAIMED_LIVE --restore--> CLAIMED_STASHED --claim--> CLAIMED_LIVE

The restore edges are gated by ``RestorePolicy`` (default DISABLED, where
``restore`` writes the stash and then fails with ``UnsupportedError``).

Callers must hold exclusive access to a ``Parent`` for ``claim``/``restore``.
There is no internal locking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from derived_objects.config import NamespaceConfig, RestorePolicy
from derived_objects.derivation import derive_address
from derived_objects.errors import (
    AlreadyClaimedError,
    AlreadyStashedError,
    InvalidParentError,
    ObjectNotFoundError,
    UnsupportedError,
)
from derived_objects.identity import UID, Address, IdentityRegistry, to_address
from derived_objects.keys import Key
from derived_objects.ledger.claims import ClaimLedger
from derived_objects.ledger.store import AttachedStore

logger = logging.getLogger(__name__)


@dataclass
class Parent:
    """A parent object: its identifier plus the claim ledger it owns."""

    uid: UID
    ledger: ClaimLedger

    @classmethod
    def create(cls, uid: UID, store: Optional[AttachedStore] = None) -> "Parent":
        return cls(uid=uid, ledger=ClaimLedger(uid.address, store))

    @property
    def id(self) -> Address:
        return self.uid.address


ParentLike = Union[Parent, UID, Address, str]


class DerivedNamespace:
    """Public entry point composing key encoding, derivation and the ledger."""

    def __init__(
        self,
        registry: Optional[IdentityRegistry] = None,
        config: Optional[NamespaceConfig] = None,
    ) -> None:
        self.config = config if config is not None else NamespaceConfig()
        self._hasher_factory = self.config.hasher_factory()
        if registry is None:
            registry = IdentityRegistry(
                self.config.session_digest_bytes(), self._hasher_factory
            )
        self.registry = registry

    @property
    def restore_policy(self) -> RestorePolicy:
        return self.config.restore_policy

    def new_parent(self, store: Optional[AttachedStore] = None) -> Parent:
        """Create a parent with a fresh identifier and an empty ledger."""
        return Parent.create(self.registry.fresh(), store)

    def derive_address(self, parent: ParentLike, key: Key) -> Address:
        """Side-effect free; usable without access to the parent's ledger."""
        parent_id = parent.id if isinstance(parent, Parent) else to_address(parent)
        return derive_address(parent_id, key, hasher_factory=self._hasher_factory)

    def exists(self, parent: Parent, key: Key) -> bool:
        """True if ``key`` was ever claimed under ``parent``, whether or not the child lives."""
        return parent.ledger.contains(self.derive_address(parent, key))

    def claim(self, parent: Parent, key: Key) -> UID:
        """
        Claim the derived identifier for ``key`` under ``parent``.

        Raises:
            AlreadyClaimedError: The key was claimed before and holds no stash
            UnsupportedError: The key holds a stash but restore is not enabled
            AddressInUseError: The registry already has a live object there
        """
        address = self.derive_address(parent, key)
        record = parent.ledger.record(address)

        if record is None:
            uid = self.registry.new_from_address(address)
            parent.ledger.record_claim(address)
            logger.info(f"Claimed {address.hex()} under parent {parent.id.hex()} for key {key}")
            return uid

        if record.stashed is None:
            raise AlreadyClaimedError(
                f"key {key} already claimed under parent {parent.id.hex()}",
                address=address.hex(),
            )

        if self.restore_policy is not RestorePolicy.ENABLED:
            raise UnsupportedError(
                f"reclaiming a restored identifier is disabled (policy={self.restore_policy.value})",
                address=address.hex(),
            )

        uid = self.registry.new_from_address(address)
        parent.ledger.take_stash(address)
        logger.info(f"Reclaimed stashed {address.hex()} under parent {parent.id.hex()}")
        return uid

    def restore(self, parent: Parent, uid: UID) -> None:
        """
        Hand a previously claimed identifier back to its parent's ledger.

        Under ENABLED the identifier is parked in the registry: it is not live
        again until the next ``claim`` of its key binds it.

        Raises:
            InvalidParentError: ``uid`` was never claimed under ``parent``
            AlreadyStashedError: The record already holds a stash
            ObjectNotFoundError: ``uid`` is no longer live
            UnsupportedError: The restore policy is not ENABLED
        """
        address = uid.address
        record = parent.ledger.record(address)
        if record is None:
            raise InvalidParentError(
                f"{address.hex()} was not claimed under parent {parent.id.hex()}",
                address=address.hex(),
            )
        if record.stashed is not None:
            raise AlreadyStashedError(
                f"{address.hex()} already restored under parent {parent.id.hex()}",
                address=address.hex(),
            )
        if not self.registry.is_live(address):
            raise ObjectNotFoundError(
                f"{address.hex()} is not a live object", address=address.hex()
            )

        policy = self.restore_policy
        if policy is RestorePolicy.DISABLED_ATOMIC:
            raise UnsupportedError("restore is disabled", address=address.hex())

        if policy is RestorePolicy.DISABLED:
            # the caller keeps the live identifier; only the record changes
            parent.ledger.stash(address, uid)
            logger.warning(
                f"Restore of {address.hex()} recorded a stash before failing; "
                "the ledger keeps it"
            )
            raise UnsupportedError("restore is disabled", address=address.hex())

        self.registry.park(uid)
        parent.ledger.stash(address, uid)
        logger.info(f"Restored {address.hex()} under parent {parent.id.hex()}")
