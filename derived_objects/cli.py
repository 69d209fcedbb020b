#!/usr/bin/env python3
"""
Derived-object address tool.

Commands:
    derive      Print the address a key derives to under a parent
    encode-key  Print the canonical key encoding that gets hashed

Examples:
    python -m derived_objects derive --parent 0x2 --type 'vector<u8>' --value foo
    python -m derived_objects derive --parent 0x2 --type u64 --value 0 --json
    python -m derived_objects encode-key --type 0x1::string::String --value demo
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv

from derived_objects.canon.bcs import BcsEncodingError
from derived_objects.canon.type_tags import (
    ASCII_STRING_TAG,
    OBJECT_ID_TAG,
    STRING_TAG,
    U8,
    TypeTag,
    TypeTagKind,
    TypeTagParseError,
    parse_type_tag,
)
from derived_objects.config import ConfigError, load_config
from derived_objects.derivation import derive_address
from derived_objects.identity import Address
from derived_objects.keys import Key, encode_key, wrap_key_type

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 2


def _parse_int(text: str) -> int:
    return int(text, 0)


def parse_value(type_tag: TypeTag, text: str) -> Any:
    """Interpret command-line text as a value of ``type_tag``."""
    kind = type_tag.kind
    if kind == TypeTagKind.BOOL:
        lowered = text.strip().lower()
        if lowered not in ("true", "false"):
            raise ValueError(f"expected true/false, got {text!r}")
        return lowered == "true"
    if kind in (
        TypeTagKind.U8,
        TypeTagKind.U16,
        TypeTagKind.U32,
        TypeTagKind.U64,
        TypeTagKind.U128,
        TypeTagKind.U256,
    ):
        return _parse_int(text)
    if kind == TypeTagKind.ADDRESS or type_tag == OBJECT_ID_TAG:
        return Address.from_hex(text)
    if type_tag in (STRING_TAG, ASCII_STRING_TAG):
        return text
    if kind == TypeTagKind.VECTOR:
        if type_tag.element == U8:
            if text.startswith("0x"):
                return bytes.fromhex(text[2:])
            return text.encode("utf-8")
        items = json.loads(text)
        if not isinstance(items, list):
            raise ValueError(f"expected a JSON array for {type_tag}")
        return [
            item if not isinstance(item, str) else parse_value(type_tag.element, item)
            for item in items
        ]
    raise ValueError(f"values of {type_tag} must be given with --bcs-hex")


def build_key(type_text: str, value: Optional[str], bcs_hex: Optional[str]) -> Key:
    type_tag = parse_type_tag(type_text)
    if bcs_hex is not None:
        digits = bcs_hex[2:] if bcs_hex.startswith("0x") else bcs_hex
        return Key.from_bcs(type_tag, bytes.fromhex(digits))
    return Key.of(type_tag, parse_value(type_tag, value))


def _add_key_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--type", "-t", required=True, help="Key type tag, e.g. 'vector<u8>'")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--value", "-v", help="Key value as text")
    source.add_argument("--bcs-hex", help="Key value as pre-serialized BCS hex")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="derived-objects",
        description="Compute derived-object addresses",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to YAML configuration")
    parser.add_argument("--verbose", action="store_true", help="Log derivation details")
    sub = parser.add_subparsers(dest="command", required=True)

    derive = sub.add_parser("derive", help="Print the derived address")
    derive.add_argument("--parent", "-p", required=True, help="Parent object id (hex)")
    _add_key_arguments(derive)
    derive.add_argument("--json", action="store_true", help="Emit a JSON object")

    encode = sub.add_parser("encode-key", help="Print the canonical key encoding")
    _add_key_arguments(encode)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except (ConfigError, OSError) as e:
        print(f"config error: {e}", file=sys.stderr)
        return EXIT_ERROR

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    try:
        key = build_key(args.type, args.value, args.bcs_hex)
        if args.command == "encode-key":
            print("0x" + encode_key(key).hex())
            return EXIT_OK

        parent = Address.from_hex(args.parent)
        derived = derive_address(parent, key, hasher_factory=config.hasher_factory())
    except (TypeTagParseError, BcsEncodingError, ValueError) as e:
        logger.error(f"Cannot derive address: {e}")
        return EXIT_ERROR

    if args.json:
        print(
            json.dumps(
                {
                    "parent": parent.hex(),
                    "key_type": str(wrap_key_type(key.type_tag)),
                    "key_bcs": "0x" + key.bcs.hex(),
                    "hash": config.hash_algorithm,
                    "derived_address": derived.hex(),
                },
                sort_keys=True,
            )
        )
    else:
        print(derived.hex())
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
