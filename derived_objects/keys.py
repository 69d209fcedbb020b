"""
Typed keys and their canonical encoding.

A ``Key`` is a value together with its static type tag. Two keys are equal
exactly when their type tags and BCS value bytes are equal, and that is what
the namespace hashes:

    encode_key(k) = u64_le(len(bcs(v))) || bcs(v) || bcs(DerivedObjectKey<T>)

Wrapping ``T`` in the namespace-local ``0x2::derived_object::DerivedObjectKey``
struct keeps the tags of this namespace apart from any other user of the same
type tags.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any, Iterable, Sequence, Tuple, Union

from derived_objects.canon import bcs
from derived_objects.canon.type_tags import (
    ADDRESS,
    ASCII_STRING_TAG,
    BOOL,
    FRAMEWORK_ADDRESS,
    OBJECT_ID_TAG,
    STD_ADDRESS,
    STRING_TAG,
    U8,
    U16,
    U32,
    U64,
    U128,
    U256,
    StructTag,
    TypeTag,
    TypeTagKind,
)
from derived_objects.identity import Address, to_address

DERIVED_OBJECT_MODULE = "derived_object"
DERIVED_OBJECT_KEY_NAME = "DerivedObjectKey"

_UINT_KINDS = {
    TypeTagKind.U8: "u8",
    TypeTagKind.U16: "u16",
    TypeTagKind.U32: "u32",
    TypeTagKind.U64: "u64",
    TypeTagKind.U128: "u128",
    TypeTagKind.U256: "u256",
}


@dataclass(frozen=True)
class StructValue:
    """Field values of a user struct, in declaration order."""

    fields: Tuple[Tuple[TypeTag, Any], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))


def _is_option(tag: TypeTag) -> bool:
    st = tag.struct
    return (
        st is not None
        and st.address == STD_ADDRESS
        and st.module == "option"
        and st.name == "Option"
        and len(st.type_params) == 1
    )


def encode_value(type_tag: TypeTag, value: Any) -> bytes:
    """
    BCS-encode ``value`` as an instance of ``type_tag``.

    Raises:
        BcsEncodingError: If ``value`` does not fit ``type_tag``
    """
    kind = type_tag.kind
    if kind == TypeTagKind.BOOL:
        return bcs.encode_bool(value)
    if kind in _UINT_KINDS:
        return bcs.encode_uint(_UINT_KINDS[kind], value)
    if kind == TypeTagKind.ADDRESS:
        return _encode_address_like(value)
    if kind == TypeTagKind.SIGNER:
        raise bcs.BcsEncodingError("signer values cannot be used as keys")
    if kind == TypeTagKind.VECTOR:
        element = type_tag.element
        if element == U8 and isinstance(value, (bytes, bytearray)):
            return bcs.encode_bytes(value)
        if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Sequence):
            raise bcs.BcsEncodingError(
                f"expected a sequence for {type_tag}, got {type(value).__name__}"
            )
        return bcs.encode_sequence(value, lambda item: encode_value(element, item))

    # structs
    if type_tag == STRING_TAG:
        return bcs.encode_str(value)
    if type_tag == ASCII_STRING_TAG:
        if not isinstance(value, str) or not value.isascii():
            raise bcs.BcsEncodingError(f"expected ASCII text for {type_tag}, got {value!r}")
        return bcs.encode_bytes(value.encode("ascii"))
    if type_tag == OBJECT_ID_TAG:
        return _encode_address_like(value)
    if _is_option(type_tag):
        if value is None:
            return b"\x00"
        return b"\x01" + encode_value(type_tag.struct.type_params[0], value)
    if not isinstance(value, StructValue):
        raise bcs.BcsEncodingError(
            f"struct {type_tag} needs a StructValue, got {type(value).__name__}"
        )
    return b"".join(encode_value(tag, field) for tag, field in value.fields)


def _encode_address_like(value: Any) -> bytes:
    try:
        return bcs.encode_address(to_address(value))
    except (TypeError, ValueError) as exc:
        raise bcs.BcsEncodingError(f"invalid address value {value!r}: {exc}") from exc


@dataclass(frozen=True)
class Key:
    """A typed key: static type tag plus the BCS bytes of its value."""

    type_tag: TypeTag
    bcs: bytes

    @classmethod
    def of(cls, type_tag: TypeTag, value: Any) -> "Key":
        return cls(type_tag, encode_value(type_tag, value))

    @classmethod
    def from_bcs(cls, type_tag: TypeTag, raw: Union[bytes, bytearray]) -> "Key":
        """Wrap bytes that are already the BCS encoding of a ``type_tag`` value."""
        return cls(type_tag, bytes(raw))

    @classmethod
    def boolean(cls, value: bool) -> "Key":
        return cls.of(BOOL, value)

    @classmethod
    def u8(cls, value: int) -> "Key":
        return cls.of(U8, value)

    @classmethod
    def u16(cls, value: int) -> "Key":
        return cls.of(U16, value)

    @classmethod
    def u32(cls, value: int) -> "Key":
        return cls.of(U32, value)

    @classmethod
    def u64(cls, value: int) -> "Key":
        return cls.of(U64, value)

    @classmethod
    def u128(cls, value: int) -> "Key":
        return cls.of(U128, value)

    @classmethod
    def u256(cls, value: int) -> "Key":
        return cls.of(U256, value)

    @classmethod
    def address(cls, value: Union[Address, str]) -> "Key":
        return cls.of(ADDRESS, value)

    @classmethod
    def object_id(cls, value: Union[Address, str]) -> "Key":
        return cls.of(OBJECT_ID_TAG, value)

    @classmethod
    def raw_bytes(cls, value: Union[bytes, bytearray]) -> "Key":
        """``vector<u8>``."""
        return cls.of(TypeTag.vector(U8), value)

    @classmethod
    def text(cls, value: str) -> "Key":
        """``0x1::string::String`` (UTF-8)."""
        return cls.of(STRING_TAG, value)

    @classmethod
    def ascii(cls, value: str) -> "Key":
        """``0x1::ascii::String``."""
        return cls.of(ASCII_STRING_TAG, value)

    @classmethod
    def vector(cls, element: TypeTag, items: Sequence[Any]) -> "Key":
        return cls.of(TypeTag.vector(element), items)

    @classmethod
    def struct(cls, type_tag: TypeTag, fields: Iterable[Tuple[TypeTag, Any]]) -> "Key":
        return cls.of(type_tag, StructValue(fields))

    def to_bcs(self) -> bytes:
        return self.bcs

    def __str__(self) -> str:
        return f"{self.type_tag}(0x{self.bcs.hex()})"


def wrap_key_type(type_tag: TypeTag) -> TypeTag:
    """Return ``0x2::derived_object::DerivedObjectKey<type_tag>``."""
    return TypeTag.from_struct(
        StructTag(
            FRAMEWORK_ADDRESS,
            DERIVED_OBJECT_MODULE,
            DERIVED_OBJECT_KEY_NAME,
            (type_tag,),
        )
    )


def tag_and_encode(type_tag: TypeTag, key_bytes: bytes) -> bytes:
    """Length-prefixed key bytes followed by the BCS of the wrapped key type."""
    return (
        struct.pack("<Q", len(key_bytes))
        + bytes(key_bytes)
        + wrap_key_type(type_tag).to_bcs()
    )


def encode_key(key: Key) -> bytes:
    return tag_and_encode(key.type_tag, key.bcs)
