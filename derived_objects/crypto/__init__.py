"""
Hash primitives with intent-scope domain separation.
"""

from derived_objects.crypto.hashing import (
    DEFAULT_HASH,
    DIGEST_LENGTH,
    HashingIntentScope,
    UnknownHashAlgorithm,
    available_hashes,
    blake2b256,
    get_hasher_factory,
)

__all__ = [
    "DEFAULT_HASH",
    "DIGEST_LENGTH",
    "HashingIntentScope",
    "UnknownHashAlgorithm",
    "available_hashes",
    "blake2b256",
    "get_hasher_factory",
]
