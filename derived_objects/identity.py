"""
Addresses, identifiers and the object-identity provider.

An ``Address`` is 32 raw bytes. A ``UID`` is a live identifier bound to an
address; the ``IdentityRegistry`` hands them out and guarantees that no two
live identifiers ever share an address.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import Dict, Optional, Union

from derived_objects.crypto.hashing import (
    DIGEST_LENGTH,
    HasherFactory,
    HashingIntentScope,
    get_hasher_factory,
)
from derived_objects.errors import AddressInUseError, ObjectNotFoundError

logger = logging.getLogger(__name__)

ADDRESS_LENGTH = 32


@dataclass(frozen=True, order=True)
class Address:
    """A 32-byte address. Derived addresses and object ids share this type."""

    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray)):
            raise TypeError(f"address must be bytes, got {type(self.value).__name__}")
        if len(self.value) != ADDRESS_LENGTH:
            raise ValueError(
                f"address must be {ADDRESS_LENGTH} bytes, got {len(self.value)}"
            )
        object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def from_hex(cls, text: str) -> "Address":
        """
        Parse ``0x``-prefixed (or bare) hex. Short forms such as ``0x2`` are
        left-padded with zeros.
        """
        digits = text.strip()
        if digits[:2].lower() == "0x":
            digits = digits[2:]
        if not digits or len(digits) > ADDRESS_LENGTH * 2:
            raise ValueError(f"invalid address literal: {text!r}")
        try:
            raw = bytes.fromhex(digits.rjust(ADDRESS_LENGTH * 2, "0"))
        except ValueError:
            raise ValueError(f"invalid address literal: {text!r}") from None
        return cls(raw)

    @classmethod
    def from_bytes(cls, raw: Union[bytes, bytearray]) -> "Address":
        return cls(bytes(raw))

    def hex(self) -> str:
        return "0x" + self.value.hex()

    def short_hex(self) -> str:
        stripped = self.value.hex().lstrip("0")
        return "0x" + (stripped or "0")

    def __bytes__(self) -> bytes:
        return self.value

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"Address({self.hex()})"


DerivedAddress = Address


def to_address(value: Union["Address", "UID", str, bytes]) -> Address:
    """Coerce hex text, raw bytes or a UID into an ``Address``."""
    if isinstance(value, Address):
        return value
    if isinstance(value, UID):
        return value.address
    if isinstance(value, str):
        return Address.from_hex(value)
    if isinstance(value, (bytes, bytearray)):
        return Address.from_bytes(value)
    raise TypeError(f"cannot interpret {type(value).__name__} as an address")


@dataclass(frozen=True)
class UID:
    """A unique identifier; only the registry should construct these."""

    address: Address

    def __str__(self) -> str:
        return self.address.hex()


class IdentityRegistry:
    """
    Object-identity provider.

    Tracks which addresses currently have a live identifier. Fresh identifiers
    are derived deterministically from a session digest and a counter so that
    two registries seeded alike hand out the same sequence.
    """

    def __init__(
        self,
        session_digest: bytes = bytes(DIGEST_LENGTH),
        hasher_factory: Optional[HasherFactory] = None,
    ) -> None:
        if len(session_digest) != DIGEST_LENGTH:
            raise ValueError(
                f"session digest must be {DIGEST_LENGTH} bytes, got {len(session_digest)}"
            )
        self._session_digest = bytes(session_digest)
        self._hasher_factory = hasher_factory or get_hasher_factory()
        self._counter = 0
        self._live: Dict[Address, UID] = {}

    def new_from_address(self, address: Address) -> UID:
        """Bind a new live identifier to ``address``."""
        if address in self._live:
            raise AddressInUseError(
                f"a live object already exists at {address.hex()}",
                address=address.hex(),
            )
        uid = UID(address)
        self._live[address] = uid
        logger.debug(f"Registered identifier {address.hex()}")
        return uid

    def fresh(self) -> UID:
        """Allocate an identifier that is not derived from any parent."""
        while True:
            hasher = self._hasher_factory()
            hasher.update(bytes([HashingIntentScope.REGULAR_OBJECT_ID]))
            hasher.update(self._session_digest)
            hasher.update(struct.pack("<Q", self._counter))
            self._counter += 1
            address = Address(hasher.digest()[:ADDRESS_LENGTH])
            if address not in self._live:
                return self.new_from_address(address)

    def delete(self, uid: UID) -> None:
        """Destroy a live identifier. Claim records that name it are untouched."""
        if uid.address not in self._live:
            raise ObjectNotFoundError(
                f"no live object {uid.address.hex()}", address=uid.address.hex()
            )
        del self._live[uid.address]
        logger.debug(f"Deleted identifier {uid.address.hex()}")

    def park(self, uid: UID) -> None:
        """
        Take a live identifier out of circulation without destroying its
        address. A parked identifier is bound again with ``new_from_address``.
        """
        if uid.address not in self._live:
            raise ObjectNotFoundError(
                f"no live object {uid.address.hex()}", address=uid.address.hex()
            )
        del self._live[uid.address]
        logger.debug(f"Parked identifier {uid.address.hex()}")

    def is_live(self, address: Address) -> bool:
        return address in self._live

    def __len__(self) -> int:
        return len(self._live)
