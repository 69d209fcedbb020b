"""
Namespace configuration.

Sources, in order of use:
- ``NamespaceConfig.from_file(path)``: YAML document
- ``NamespaceConfig.from_env()``: ``DERIVED_OBJECTS_*`` environment variables

Example YAML::

    restore:
      policy: disabled          # disabled | disabled-atomic | enabled
    hashing:
      algorithm: blake2b-256    # blake2b-256 | sha3-256
    identity:
      session_digest: "0x00"    # hex, left-padded to 32 bytes
    logging:
      level: WARNING
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from derived_objects.crypto.hashing import (
    DEFAULT_HASH,
    DIGEST_LENGTH,
    HasherFactory,
    UnknownHashAlgorithm,
    get_hasher_factory,
)

ENV_PREFIX = "DERIVED_OBJECTS_"
DEFAULT_SESSION_DIGEST = "0x" + "00" * DIGEST_LENGTH


class ConfigError(ValueError):
    """Raised when configuration values are malformed."""


class RestorePolicy(str, Enum):
    """
    How ``restore`` (and the stash branch of ``claim``) behaves.

    DISABLED: validate, write the stash, then fail with Unsupported.
    DISABLED_ATOMIC: validate, then fail with Unsupported without writing.
    ENABLED: stash on restore; the next claim of the key returns the stash.
    """

    DISABLED = "disabled"
    DISABLED_ATOMIC = "disabled-atomic"
    ENABLED = "enabled"


@dataclass(slots=True)
class NamespaceConfig:
    restore_policy: RestorePolicy = RestorePolicy.DISABLED
    hash_algorithm: str = DEFAULT_HASH
    session_digest: str = DEFAULT_SESSION_DIGEST
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        try:
            self.restore_policy = RestorePolicy(self.restore_policy)
        except ValueError:
            choices = [p.value for p in RestorePolicy]
            raise ConfigError(
                f"restore policy must be one of {choices}, got {self.restore_policy!r}"
            ) from None
        try:
            get_hasher_factory(self.hash_algorithm)
        except UnknownHashAlgorithm as exc:
            raise ConfigError(str(exc)) from exc
        self.session_digest_bytes()
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigError(f"unknown log level {self.log_level!r}")

    def session_digest_bytes(self) -> bytes:
        digits = self.session_digest.strip()
        if digits[:2].lower() == "0x":
            digits = digits[2:]
        if len(digits) > DIGEST_LENGTH * 2:
            raise ConfigError(f"session digest longer than {DIGEST_LENGTH} bytes")
        try:
            return bytes.fromhex(digits.rjust(DIGEST_LENGTH * 2, "0"))
        except ValueError:
            raise ConfigError(f"session digest is not hex: {self.session_digest!r}") from None

    def hasher_factory(self) -> HasherFactory:
        return get_hasher_factory(self.hash_algorithm)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["restore_policy"] = self.restore_policy.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NamespaceConfig":
        restore = _section(data, "restore")
        hashing = _section(data, "hashing")
        identity = _section(data, "identity")
        logging_cfg = _section(data, "logging")
        digest = identity.get("session_digest", DEFAULT_SESSION_DIGEST)
        if isinstance(digest, int):
            # unquoted 0x.. literals arrive as YAML integers
            digest = f"{digest:#x}"
        return cls(
            restore_policy=restore.get("policy", RestorePolicy.DISABLED.value),
            hash_algorithm=str(hashing.get("algorithm", DEFAULT_HASH)),
            session_digest=str(digest),
            log_level=str(logging_cfg.get("level", "WARNING")),
        )

    @classmethod
    def from_file(cls, path: Path | str) -> "NamespaceConfig":
        try:
            data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"{path}: invalid YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: expected a mapping at the top level")
        return cls.from_dict(data)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "NamespaceConfig":
        env = os.environ if environ is None else environ
        return cls(
            restore_policy=env.get(ENV_PREFIX + "RESTORE_POLICY", RestorePolicy.DISABLED.value),
            hash_algorithm=env.get(ENV_PREFIX + "HASH", DEFAULT_HASH),
            session_digest=env.get(ENV_PREFIX + "SESSION_DIGEST", DEFAULT_SESSION_DIGEST),
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL", "WARNING"),
        )


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"section {name!r} must be a mapping, got {type(section).__name__}")
    return section


def load_config(path: Optional[Path | str] = None) -> NamespaceConfig:
    """Load from ``path`` when given, otherwise from the environment."""
    if path is not None:
        return NamespaceConfig.from_file(path)
    return NamespaceConfig.from_env()
