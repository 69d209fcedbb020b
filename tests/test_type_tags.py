"""
Tests for type tag encoding, display and parsing.
"""

import pytest

from derived_objects.canon.type_tags import (
    ADDRESS,
    ASCII_STRING_TAG,
    BOOL,
    FRAMEWORK_ADDRESS,
    STRING_TAG,
    U8,
    U64,
    U256,
    StructTag,
    TypeTag,
    TypeTagKind,
    TypeTagParseError,
    parse_type_tag,
    struct_tag,
)
from derived_objects.identity import Address


class TestEncoding:
    def test_primitive_variant_indexes(self):
        assert BOOL.to_bcs() == b"\x00"
        assert U8.to_bcs() == b"\x01"
        assert U64.to_bcs() == b"\x02"
        assert ADDRESS.to_bcs() == b"\x04"
        assert U256.to_bcs() == b"\x0a"

    def test_vector_nests_element(self):
        assert TypeTag.vector(U8).to_bcs() == b"\x06\x01"
        assert TypeTag.vector(TypeTag.vector(U64)).to_bcs() == b"\x06\x06\x02"

    def test_struct_layout(self):
        tag = struct_tag("0x2", "m", "N", [U64])
        expected = (
            b"\x07"
            + FRAMEWORK_ADDRESS.value
            + b"\x01m"
            + b"\x01N"
            + b"\x01\x02"
        )
        assert tag.to_bcs() == expected

    def test_string_tags_differ(self):
        assert STRING_TAG.to_bcs() != ASCII_STRING_TAG.to_bcs()


class TestDisplayAndParse:
    @pytest.mark.parametrize(
        "text",
        [
            "u8",
            "u64",
            "bool",
            "address",
            "vector<u8>",
            "vector<vector<u64>>",
            "0x1::string::String",
            "0x2::derived_object::DerivedObjectKey<vector<u8>>",
            "0x2::m::Pair<u64, 0x1::ascii::String>",
        ],
    )
    def test_display_round_trips(self, text):
        assert str(parse_type_tag(text)) == text

    def test_whitespace_and_full_addresses(self):
        tag = parse_type_tag(" 0x0000000000000000000000000000000000000000000000000000000000000002 :: m :: N < u64 > ")
        assert tag == struct_tag("0x2", "m", "N", [U64])

    def test_named_addresses(self):
        assert parse_type_tag("std::string::String") == STRING_TAG
        assert parse_type_tag("sui::object::ID").struct.address == Address.from_hex("0x2")

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "vector<u8",
            "vector<>",
            "u64 u8",
            "0x2::m",
            "0x2::m::N<",
            "foo",
            "0x2::1m::N",
            "0x2::m::N<u8,>",
            "u8$",
        ],
    )
    def test_malformed_input(self, text):
        with pytest.raises(TypeTagParseError):
            parse_type_tag(text)


class TestValidation:
    def test_struct_identifiers_are_checked(self):
        with pytest.raises(ValueError):
            StructTag(FRAMEWORK_ADDRESS, "bad-module", "N")
        with pytest.raises(ValueError):
            StructTag(FRAMEWORK_ADDRESS, "m", "")

    def test_vector_requires_element(self):
        with pytest.raises(ValueError):
            TypeTag(TypeTagKind.VECTOR)
        with pytest.raises(ValueError):
            TypeTag(TypeTagKind.U8, element=U8)

    def test_tags_are_hashable_values(self):
        assert {TypeTag.vector(U8), TypeTag.vector(U8)} == {TypeTag.vector(U8)}
