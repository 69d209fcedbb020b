"""
Type tags: the static-shape discriminator attached to every key.

A type tag is serialized with BCS as an enum (ULEB128 variant index followed
by the payload), so ``vector<u8>`` and ``vector<u64>`` or ``0x1::string::String``
and ``0x1::ascii::String`` never share an encoding even when the values they
describe do.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Optional, Tuple

from derived_objects.canon.bcs import encode_sequence, encode_str, uleb128
from derived_objects.identity import Address

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_TOKEN_RE = re.compile(r"\s*(0x[0-9A-Fa-f]+|::|<|>|,|[A-Za-z_][A-Za-z0-9_]*)")

STD_ADDRESS = Address.from_hex("0x1")
FRAMEWORK_ADDRESS = Address.from_hex("0x2")

_NAMED_ADDRESSES = {
    "std": STD_ADDRESS,
    "sui": FRAMEWORK_ADDRESS,
}


class TypeTagKind(IntEnum):
    """BCS variant indexes. The numbering is part of the wire format."""

    BOOL = 0
    U8 = 1
    U64 = 2
    U128 = 3
    ADDRESS = 4
    SIGNER = 5
    VECTOR = 6
    STRUCT = 7
    U16 = 8
    U32 = 9
    U256 = 10


_PRIMITIVE_NAMES = {
    TypeTagKind.BOOL: "bool",
    TypeTagKind.U8: "u8",
    TypeTagKind.U16: "u16",
    TypeTagKind.U32: "u32",
    TypeTagKind.U64: "u64",
    TypeTagKind.U128: "u128",
    TypeTagKind.U256: "u256",
    TypeTagKind.ADDRESS: "address",
    TypeTagKind.SIGNER: "signer",
}
_PRIMITIVE_BY_NAME = {name: kind for kind, name in _PRIMITIVE_NAMES.items()}


class TypeTagParseError(ValueError):
    """Raised for malformed type tag text."""


def is_valid_identifier(text: str) -> bool:
    return bool(_IDENTIFIER_RE.match(text))


@dataclass(frozen=True)
class StructTag:
    """A fully-qualified struct type ``address::module::Name<params>``."""

    address: Address
    module: str
    name: str
    type_params: Tuple["TypeTag", ...] = ()

    def __post_init__(self) -> None:
        for label, ident in (("module", self.module), ("name", self.name)):
            if not is_valid_identifier(ident):
                raise ValueError(f"invalid {label} identifier: {ident!r}")
        object.__setattr__(self, "type_params", tuple(self.type_params))

    def to_bcs(self) -> bytes:
        return (
            self.address.value
            + encode_str(self.module)
            + encode_str(self.name)
            + encode_sequence(self.type_params, lambda tag: tag.to_bcs())
        )

    def __str__(self) -> str:
        base = f"{self.address.short_hex()}::{self.module}::{self.name}"
        if self.type_params:
            base += "<" + ", ".join(str(p) for p in self.type_params) + ">"
        return base


@dataclass(frozen=True)
class TypeTag:
    """
    A key's static type.

    ``element`` is set only for vectors, ``struct`` only for structs.
    """

    kind: TypeTagKind
    element: Optional["TypeTag"] = None
    struct: Optional[StructTag] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", TypeTagKind(self.kind))
        if (self.kind == TypeTagKind.VECTOR) != (self.element is not None):
            raise ValueError("vector type tags (and only those) carry an element type")
        if (self.kind == TypeTagKind.STRUCT) != (self.struct is not None):
            raise ValueError("struct type tags (and only those) carry a StructTag")

    @classmethod
    def vector(cls, element: "TypeTag") -> "TypeTag":
        return cls(TypeTagKind.VECTOR, element=element)

    @classmethod
    def from_struct(cls, struct: StructTag) -> "TypeTag":
        return cls(TypeTagKind.STRUCT, struct=struct)

    @classmethod
    def parse(cls, text: str) -> "TypeTag":
        return parse_type_tag(text)

    def to_bcs(self) -> bytes:
        head = uleb128(int(self.kind))
        if self.element is not None:
            return head + self.element.to_bcs()
        if self.struct is not None:
            return head + self.struct.to_bcs()
        return head

    def __str__(self) -> str:
        if self.element is not None:
            return f"vector<{self.element}>"
        if self.struct is not None:
            return str(self.struct)
        return _PRIMITIVE_NAMES[self.kind]


BOOL = TypeTag(TypeTagKind.BOOL)
U8 = TypeTag(TypeTagKind.U8)
U16 = TypeTag(TypeTagKind.U16)
U32 = TypeTag(TypeTagKind.U32)
U64 = TypeTag(TypeTagKind.U64)
U128 = TypeTag(TypeTagKind.U128)
U256 = TypeTag(TypeTagKind.U256)
ADDRESS = TypeTag(TypeTagKind.ADDRESS)
SIGNER = TypeTag(TypeTagKind.SIGNER)

STRING_TAG = TypeTag.from_struct(StructTag(STD_ADDRESS, "string", "String"))
ASCII_STRING_TAG = TypeTag.from_struct(StructTag(STD_ADDRESS, "ascii", "String"))
OBJECT_ID_TAG = TypeTag.from_struct(StructTag(FRAMEWORK_ADDRESS, "object", "ID"))


def struct_tag(
    address: str,
    module: str,
    name: str,
    type_params: Iterable[TypeTag] = (),
) -> TypeTag:
    """Shorthand for ``TypeTag.from_struct(StructTag(...))`` with a hex address."""
    return TypeTag.from_struct(
        StructTag(Address.from_hex(address), module, name, tuple(type_params))
    )


# ---------- parsing ----------
def _tokenize(text: str) -> List[str]:
    tokens: List[str] = []
    pos = 0
    stripped = text.rstrip()
    while pos < len(stripped):
        match = _TOKEN_RE.match(stripped, pos)
        if not match:
            raise TypeTagParseError(f"unexpected character at {pos} in {text!r}")
        tokens.append(match.group(1))
        pos = match.end()
    return tokens


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0

    def peek(self) -> Optional[str]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next(self) -> str:
        token = self.peek()
        if token is None:
            raise TypeTagParseError(f"unexpected end of input in {self.text!r}")
        self.pos += 1
        return token

    def expect(self, token: str) -> None:
        found = self.next()
        if found != token:
            raise TypeTagParseError(f"expected {token!r}, found {found!r} in {self.text!r}")

    def parse_type(self) -> TypeTag:
        token = self.next()
        if token == "vector":
            self.expect("<")
            element = self.parse_type()
            self.expect(">")
            return TypeTag.vector(element)
        if token in _PRIMITIVE_BY_NAME:
            return TypeTag(_PRIMITIVE_BY_NAME[token])
        if token.startswith("0x"):
            try:
                address = Address.from_hex(token)
            except ValueError as exc:
                raise TypeTagParseError(str(exc)) from exc
        elif token in _NAMED_ADDRESSES:
            address = _NAMED_ADDRESSES[token]
        else:
            raise TypeTagParseError(f"unknown type {token!r} in {self.text!r}")
        self.expect("::")
        module = self.next()
        self.expect("::")
        name = self.next()
        params: List[TypeTag] = []
        if self.peek() == "<":
            self.next()
            params.append(self.parse_type())
            while self.peek() == ",":
                self.next()
                params.append(self.parse_type())
            self.expect(">")
        try:
            return TypeTag.from_struct(StructTag(address, module, name, tuple(params)))
        except ValueError as exc:
            raise TypeTagParseError(str(exc)) from exc


def parse_type_tag(text: str) -> TypeTag:
    """
    Parse the display form of a type tag.

    Accepts primitives (``u64``), vectors (``vector<u8>``) and structs with an
    explicit hex address or one of the named addresses ``std``/``sui``
    (``0x2::derived_object::DerivedObjectKey<u64>``).

    Raises:
        TypeTagParseError: If ``text`` is not a single well-formed type tag
    """
    parser = _Parser(text)
    if parser.peek() is None:
        raise TypeTagParseError("empty type tag")
    tag = parser.parse_type()
    if parser.peek() is not None:
        raise TypeTagParseError(f"trailing input {parser.peek()!r} in {text!r}")
    return tag
