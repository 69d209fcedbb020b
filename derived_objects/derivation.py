"""
Address derivation for derived objects.

    addr = H(0xF0 || parent || u64_le(len(key)) || key || bcs(DerivedObjectKey<T>))[:32]

Derivation is a pure function of the parent id, the key type and the key
bytes. Anyone can compute a child's address before the child exists, without
touching the parent's ledger.
"""

from __future__ import annotations

import logging
from typing import Optional

from derived_objects.canon.type_tags import TypeTag
from derived_objects.crypto.hashing import (
    HasherFactory,
    HashingIntentScope,
    get_hasher_factory,
)
from derived_objects.identity import ADDRESS_LENGTH, Address
from derived_objects.keys import Key, tag_and_encode, wrap_key_type

logger = logging.getLogger(__name__)


def derive_object_id(
    parent_id: Address,
    key_type_tag: TypeTag,
    key_bytes: bytes,
    *,
    hasher_factory: Optional[HasherFactory] = None,
) -> Address:
    """
    Derive a child address from a parent id, a key type tag and BCS key bytes.

    Args:
        parent_id: Address of the parent object
        key_type_tag: Static type of the key (unwrapped)
        key_bytes: BCS encoding of the key value
        hasher_factory: Hash primitive; defaults to BLAKE2b-256

    Returns:
        The derived 32-byte address
    """
    factory = hasher_factory or get_hasher_factory()

    logger.debug(
        f"Deriving object id for parent={parent_id.hex()}, key=0x{bytes(key_bytes).hex()}, "
        f"key_type_tag={wrap_key_type(key_type_tag)}"
    )

    hasher = factory()
    hasher.update(bytes([HashingIntentScope.CHILD_OBJECT_ID]))
    hasher.update(parent_id.value)
    hasher.update(tag_and_encode(key_type_tag, key_bytes))
    digest = hasher.digest()

    # every supported digest is at least ADDRESS_LENGTH bytes
    derived = Address(digest[:ADDRESS_LENGTH])
    logger.debug(f"derive_object_id result: {derived.hex()}")
    return derived


def derive_address(
    parent_id: Address,
    key: Key,
    *,
    hasher_factory: Optional[HasherFactory] = None,
) -> Address:
    """Derive the address ``claim(parent, key)`` would bind."""
    return derive_object_id(
        parent_id, key.type_tag, key.bcs, hasher_factory=hasher_factory
    )
