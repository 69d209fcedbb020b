"""
Claim ledger and attached store tests.
"""

import pytest

from derived_objects.identity import UID, Address
from derived_objects.ledger import (
    ClaimLedger,
    ClaimRecord,
    ClaimState,
    Claimed,
    FieldAlreadyExistsError,
    FieldNotFoundError,
    InMemoryAttachedStore,
)

OWNER = Address.from_hex("0xa")
OTHER_OWNER = Address.from_hex("0xb")
CHILD = Address.from_hex("0xc0ffee")


class TestInMemoryAttachedStore:
    def test_fields_are_scoped_per_owner(self):
        store = InMemoryAttachedStore()
        store.insert(OWNER, "k", 1)
        assert store.exists(OWNER, "k")
        assert not store.exists(OTHER_OWNER, "k")
        assert store.field_count(OWNER) == 1
        assert store.field_count(OTHER_OWNER) == 0

    def test_insert_twice_fails(self):
        store = InMemoryAttachedStore()
        store.insert(OWNER, "k", 1)
        with pytest.raises(FieldAlreadyExistsError):
            store.insert(OWNER, "k", 2)
        assert store.borrow_mut(OWNER, "k") == 1

    def test_borrow_mut_returns_the_stored_object(self):
        store = InMemoryAttachedStore()
        store.insert(OWNER, "k", {"n": 1})
        store.borrow_mut(OWNER, "k")["n"] += 1
        assert store.borrow_mut(OWNER, "k") == {"n": 2}

    def test_borrow_missing(self):
        with pytest.raises(FieldNotFoundError):
            InMemoryAttachedStore().borrow_mut(OWNER, "missing")

    def test_store_errors_are_key_errors(self):
        with pytest.raises(KeyError):
            InMemoryAttachedStore().borrow_mut(OWNER, "missing")


class TestClaimLedger:
    def test_state_transitions(self):
        ledger = ClaimLedger(OWNER)
        assert ledger.state(CHILD) is ClaimState.ABSENT
        assert ledger.record(CHILD) is None

        ledger.record_claim(CHILD)
        assert ledger.contains(CHILD)
        assert ledger.state(CHILD) is ClaimState.CLAIMED_LIVE

        uid = UID(CHILD)
        ledger.stash(CHILD, uid)
        assert ledger.state(CHILD) is ClaimState.CLAIMED_STASHED

        assert ledger.take_stash(CHILD) == uid
        assert ledger.state(CHILD) is ClaimState.CLAIMED_LIVE

    def test_claim_count_grows_by_one_per_record(self):
        ledger = ClaimLedger(OWNER)
        ledger.record_claim(CHILD)
        ledger.record_claim(Address.from_hex("0xd"))
        assert ledger.claim_count == 2

    def test_claim_count_comes_from_the_store(self):
        store = InMemoryAttachedStore()
        ClaimLedger(OWNER, store).record_claim(CHILD)
        store.insert(OWNER, "unrelated", 1)

        reopened = ClaimLedger(OWNER, store)
        assert reopened.claim_count == 1
        assert store.field_count(OWNER) == 2
        assert ClaimLedger(OTHER_OWNER, store).claim_count == 0

    def test_second_record_for_same_address_fails(self):
        ledger = ClaimLedger(OWNER)
        ledger.record_claim(CHILD)
        with pytest.raises(FieldAlreadyExistsError):
            ledger.record_claim(CHILD)
        assert ledger.claim_count == 1

    def test_stash_guards(self):
        ledger = ClaimLedger(OWNER)
        with pytest.raises(FieldNotFoundError):
            ledger.stash(CHILD, UID(CHILD))
        ledger.record_claim(CHILD)
        with pytest.raises(ValueError):
            ledger.take_stash(CHILD)
        ledger.stash(CHILD, UID(CHILD))
        with pytest.raises(ValueError):
            ledger.stash(CHILD, UID(CHILD))

    def test_ledgers_share_a_store_without_colliding(self):
        store = InMemoryAttachedStore()
        first = ClaimLedger(OWNER, store)
        second = ClaimLedger(OTHER_OWNER, store)
        first.record_claim(CHILD)
        assert first.contains(CHILD)
        assert not second.contains(CHILD)
        # claim keys are discriminated from plain addresses
        assert store.exists(OWNER, Claimed(CHILD))
        assert not store.exists(OWNER, CHILD)

    def test_record_is_the_stored_object(self):
        store = InMemoryAttachedStore()
        ledger = ClaimLedger(OWNER, store)
        record = ledger.record_claim(CHILD)
        assert isinstance(record, ClaimRecord)
        assert store.borrow_mut(OWNER, Claimed(CHILD)) is record
