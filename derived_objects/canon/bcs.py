"""Binary Canonical Serialization (BCS) primitives.

encode_*(): one canonical byte string per value, no self-description.

Rules:
- Sequence and string lengths: ULEB128 prefix
- Fixed-width integers: little-endian, range-checked
- Booleans: 0x00 / 0x01
- Addresses: 32 raw bytes, no length prefix
- Strings: UTF-8 bytes with a length prefix
"""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar, Union

from derived_objects.identity import Address

T = TypeVar("T")

MAX_SEQUENCE_LENGTH = (1 << 31) - 1

_INT_WIDTHS = {
    "u8": 1,
    "u16": 2,
    "u32": 4,
    "u64": 8,
    "u128": 16,
    "u256": 32,
}


class BcsEncodingError(ValueError):
    """Raised when a value cannot be represented under the requested encoding."""


def uleb128(value: int) -> bytes:
    """Encode a non-negative integer as ULEB128."""
    if value < 0:
        raise BcsEncodingError(f"ULEB128 requires a non-negative value, got {value}")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _length_prefix(length: int) -> bytes:
    if length > MAX_SEQUENCE_LENGTH:
        raise BcsEncodingError(f"sequence length {length} exceeds BCS maximum")
    return uleb128(length)


def encode_bool(value: bool) -> bytes:
    if not isinstance(value, bool):
        raise BcsEncodingError(f"expected bool, got {type(value).__name__}")
    return b"\x01" if value else b"\x00"


def encode_uint(width_name: str, value: int) -> bytes:
    """Encode ``value`` as the unsigned integer type ``width_name`` (u8..u256)."""
    width = _INT_WIDTHS[width_name]
    if isinstance(value, bool) or not isinstance(value, int):
        raise BcsEncodingError(f"expected int for {width_name}, got {type(value).__name__}")
    if value < 0 or value >= 1 << (8 * width):
        raise BcsEncodingError(f"{value} out of range for {width_name}")
    return value.to_bytes(width, "little")


def encode_u8(value: int) -> bytes:
    return encode_uint("u8", value)


def encode_u16(value: int) -> bytes:
    return encode_uint("u16", value)


def encode_u32(value: int) -> bytes:
    return encode_uint("u32", value)


def encode_u64(value: int) -> bytes:
    return encode_uint("u64", value)


def encode_u128(value: int) -> bytes:
    return encode_uint("u128", value)


def encode_u256(value: int) -> bytes:
    return encode_uint("u256", value)


def encode_bytes(value: Union[bytes, bytearray]) -> bytes:
    """Length-prefixed raw bytes (``vector<u8>``)."""
    if not isinstance(value, (bytes, bytearray)):
        raise BcsEncodingError(f"expected bytes, got {type(value).__name__}")
    return _length_prefix(len(value)) + bytes(value)


def encode_str(value: str) -> bytes:
    """Length-prefixed UTF-8."""
    if not isinstance(value, str):
        raise BcsEncodingError(f"expected str, got {type(value).__name__}")
    return encode_bytes(value.encode("utf-8"))


def encode_address(value: Address) -> bytes:
    if not isinstance(value, Address):
        raise BcsEncodingError(f"expected Address, got {type(value).__name__}")
    return value.value


def encode_sequence(items: Iterable[T], encode_item: Callable[[T], bytes]) -> bytes:
    """Length prefix followed by each item's encoding, in order."""
    encoded = [encode_item(item) for item in items]
    return _length_prefix(len(encoded)) + b"".join(encoded)
