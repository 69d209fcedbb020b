"""
Canonical byte encodings: BCS primitives and type tags.
"""

from derived_objects.canon.bcs import (
    BcsEncodingError,
    encode_address,
    encode_bool,
    encode_bytes,
    encode_sequence,
    encode_str,
    encode_u8,
    encode_u16,
    encode_u32,
    encode_u64,
    encode_u128,
    encode_u256,
    encode_uint,
    uleb128,
)
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
    TypeTagParseError,
    parse_type_tag,
    struct_tag,
)

__all__ = [
    "ADDRESS",
    "ASCII_STRING_TAG",
    "BOOL",
    "BcsEncodingError",
    "FRAMEWORK_ADDRESS",
    "OBJECT_ID_TAG",
    "STD_ADDRESS",
    "STRING_TAG",
    "StructTag",
    "TypeTag",
    "TypeTagKind",
    "TypeTagParseError",
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "U256",
    "encode_address",
    "encode_bool",
    "encode_bytes",
    "encode_sequence",
    "encode_str",
    "encode_u8",
    "encode_u16",
    "encode_u32",
    "encode_u64",
    "encode_u128",
    "encode_u256",
    "encode_uint",
    "parse_type_tag",
    "struct_tag",
    "uleb128",
]
