"""
Deterministic derived-object identifiers.

Given a parent's identifier and a typed key, compute a child address that any
party can predict off-line, and record claims on the parent so that each
(parent, key) pair is handed out at most once. Importers should depend on the
names re-exported here.
"""

from derived_objects.canon.type_tags import (
    ASCII_STRING_TAG,
    OBJECT_ID_TAG,
    STRING_TAG,
    StructTag,
    TypeTag,
    TypeTagKind,
    parse_type_tag,
    struct_tag,
)
from derived_objects.config import NamespaceConfig, RestorePolicy, load_config
from derived_objects.derivation import derive_address, derive_object_id
from derived_objects.errors import (
    AbortCode,
    AddressInUseError,
    AlreadyClaimedError,
    AlreadyStashedError,
    DerivedObjectError,
    InvalidParentError,
    ObjectNotFoundError,
    UnsupportedError,
)
from derived_objects.identity import UID, Address, DerivedAddress, IdentityRegistry
from derived_objects.keys import Key, StructValue, encode_key, tag_and_encode, wrap_key_type
from derived_objects.ledger import ClaimLedger, ClaimState, InMemoryAttachedStore
from derived_objects.namespace import DerivedNamespace, Parent

__all__ = [
    # Core types
    "Address",
    "DerivedAddress",
    "Key",
    "Parent",
    "StructTag",
    "StructValue",
    "TypeTag",
    "TypeTagKind",
    "UID",
    # Well-known tags
    "ASCII_STRING_TAG",
    "OBJECT_ID_TAG",
    "STRING_TAG",
    # Encoding and derivation
    "derive_address",
    "derive_object_id",
    "encode_key",
    "parse_type_tag",
    "struct_tag",
    "tag_and_encode",
    "wrap_key_type",
    # Namespace
    "ClaimLedger",
    "ClaimState",
    "DerivedNamespace",
    "IdentityRegistry",
    "InMemoryAttachedStore",
    # Configuration
    "NamespaceConfig",
    "RestorePolicy",
    "load_config",
    # Errors
    "AbortCode",
    "AddressInUseError",
    "AlreadyClaimedError",
    "AlreadyStashedError",
    "DerivedObjectError",
    "InvalidParentError",
    "ObjectNotFoundError",
    "UnsupportedError",
]
