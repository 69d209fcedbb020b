"""
Hash primitive used by the derived-object namespace.

The whole namespace agrees on one collision-resistant hash. Every derived
address is a function of it, so switching algorithms is a breaking migration
for every address ever handed out.

Domain separation uses a one-byte hashing-intent scope prepended to the input:

    child id  = H(0xF0 || parent || ...)
    fresh id  = H(0xF1 || session_digest || counter)
"""

from __future__ import annotations

import hashlib
from enum import IntEnum
from typing import Any, Callable, Dict

DIGEST_LENGTH = 32
DEFAULT_HASH = "blake2b-256"

HasherFactory = Callable[[], Any]


class HashingIntentScope(IntEnum):
    """Domain separation tags (one byte, prefixed to the hash input)."""

    CHILD_OBJECT_ID = 0xF0
    REGULAR_OBJECT_ID = 0xF1


class UnknownHashAlgorithm(ValueError):
    """Raised when a configuration names a hash the namespace does not ship."""


def _blake2b_256() -> Any:
    return hashlib.blake2b(digest_size=DIGEST_LENGTH)


_HASHERS: Dict[str, HasherFactory] = {
    "blake2b-256": _blake2b_256,
    "sha3-256": hashlib.sha3_256,
}


def available_hashes() -> list[str]:
    return sorted(_HASHERS)


def get_hasher_factory(name: str = DEFAULT_HASH) -> HasherFactory:
    """
    Return a zero-argument factory producing a ``hashlib``-style hasher.

    Args:
        name: Algorithm name (``blake2b-256`` or ``sha3-256``)

    Raises:
        UnknownHashAlgorithm: If ``name`` is not supported
    """
    key = name.strip().lower()
    try:
        return _HASHERS[key]
    except KeyError:
        raise UnknownHashAlgorithm(
            f"unsupported hash algorithm {name!r}; expected one of {available_hashes()}"
        ) from None


def blake2b256(data: bytes) -> bytes:
    """Compute BLAKE2b with a 32-byte digest."""
    hasher = _blake2b_256()
    hasher.update(data)
    return hasher.digest()
