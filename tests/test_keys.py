"""
Key encoding tests.

The encoding must separate keys by type as well as by value: identical BCS
value bytes under different type tags may never encode alike.
"""

import struct

import pytest

from derived_objects.canon.bcs import BcsEncodingError
from derived_objects.canon.type_tags import (
    ASCII_STRING_TAG,
    STRING_TAG,
    U8,
    U64,
    TypeTag,
    parse_type_tag,
    struct_tag,
)
from derived_objects.keys import (
    Key,
    StructValue,
    encode_key,
    encode_value,
    tag_and_encode,
    wrap_key_type,
)


def test_wrapper_type():
    wrapped = wrap_key_type(TypeTag.vector(U8))
    assert str(wrapped) == "0x2::derived_object::DerivedObjectKey<vector<u8>>"


def test_tag_and_encode_layout():
    encoded = tag_and_encode(U64, b"\x00" * 8)
    assert encoded[:8] == struct.pack("<Q", 8)
    assert encoded[8:16] == b"\x00" * 8
    assert encoded[16:] == wrap_key_type(U64).to_bcs()


def test_encode_key_matches_tag_and_encode():
    key = Key.u64(7)
    assert encode_key(key) == tag_and_encode(U64, key.to_bcs())


def test_same_bytes_different_string_types():
    raw = Key.raw_bytes(b"foo")
    text = Key.text("foo")
    ascii_key = Key.ascii("foo")

    # the value bytes coincide ...
    assert raw.to_bcs() == text.to_bcs() == ascii_key.to_bcs() == b"\x03foo"
    # ... the encodings do not
    encodings = {encode_key(raw), encode_key(text), encode_key(ascii_key)}
    assert len(encodings) == 3


def test_empty_vectors_of_different_element_types():
    empty_u8 = Key.vector(U8, [])
    empty_u64 = Key.vector(U64, [])
    assert empty_u8.to_bcs() == empty_u64.to_bcs() == b"\x00"
    assert encode_key(empty_u8) != encode_key(empty_u64)


def test_equal_keys_encode_equally():
    assert Key.raw_bytes(b"demo") == Key.vector(U8, [100, 101, 109, 111])
    assert encode_key(Key.raw_bytes(b"demo")) == encode_key(Key.vector(U8, [100, 101, 109, 111]))
    assert Key.u64(1) != Key.u8(1)


def test_struct_key():
    tag = struct_tag("0x2", "derived_object_tests", "DemoStruct")
    key = Key.struct(tag, [(U64, 1)])
    assert key.to_bcs() == (1).to_bytes(8, "little")
    assert key == Key.from_bcs(tag, b"\x01" + b"\x00" * 7)


def test_nested_vectors_and_options():
    nested = Key.vector(TypeTag.vector(U8), [b"a", b"bc"])
    assert nested.to_bcs() == b"\x02\x01a\x02bc"

    option = parse_type_tag("0x1::option::Option<u64>")
    assert Key.of(option, None).to_bcs() == b"\x00"
    assert Key.of(option, 5).to_bcs() == b"\x01" + (5).to_bytes(8, "little")


def test_address_keys_accept_hex():
    assert Key.address("0x2") == Key.address("0x" + "00" * 31 + "02")
    assert Key.object_id("0x2").to_bcs() == Key.address("0x2").to_bcs()
    assert Key.object_id("0x2") != Key.address("0x2")


@pytest.mark.parametrize(
    "type_tag, value",
    [
        (ASCII_STRING_TAG, "héllo"),
        (STRING_TAG, b"foo"),
        (U8, 256),
        (TypeTag.vector(U64), "abc"),
        (struct_tag("0x2", "m", "S"), {"value": 1}),
        (parse_type_tag("signer"), b""),
        (parse_type_tag("address"), "not-hex"),
    ],
)
def test_malformed_values_are_rejected(type_tag, value):
    with pytest.raises(BcsEncodingError):
        encode_value(type_tag, value)


def test_struct_value_fields_are_ordered():
    first = StructValue([(U8, 1), (U8, 2)])
    second = StructValue([(U8, 2), (U8, 1)])
    tag = struct_tag("0x2", "m", "S")
    assert encode_value(tag, first) != encode_value(tag, second)
