"""
Error kinds surfaced by the derived-object namespace.

Every error is terminal for the call that raised it. Nothing in this package
retries: re-running ``claim`` with the same key fails again deterministically,
so the only recovery is a different key.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Optional


class AbortCode(IntEnum):
    """Numeric abort codes a host surfaces for namespace failures."""

    E_OBJECT_ALREADY_EXISTS = 0
    E_INVALID_PARENT = 1
    E_NOT_SUPPORTED = 2
    E_ALREADY_STASHED = 3
    E_ADDRESS_IN_USE = 4
    E_OBJECT_NOT_FOUND = 5


class DerivedObjectError(RuntimeError):
    """Base class for every namespace failure."""

    code: AbortCode = AbortCode.E_NOT_SUPPORTED

    def __init__(self, message: str, *, address: Optional[str] = None) -> None:
        super().__init__(message)
        self.address = address

    def to_dict(self) -> dict:
        result = {
            "error": type(self).__name__,
            "code": int(self.code),
            "message": str(self),
        }
        if self.address is not None:
            result["address"] = self.address
        return result


class AlreadyClaimedError(DerivedObjectError):
    """``claim`` was called twice for the same (parent, key)."""

    code = AbortCode.E_OBJECT_ALREADY_EXISTS


class InvalidParentError(DerivedObjectError):
    """``restore`` got an identifier that was never claimed under this parent."""

    code = AbortCode.E_INVALID_PARENT


class UnsupportedError(DerivedObjectError):
    """The operation exists but its completion path is switched off."""

    code = AbortCode.E_NOT_SUPPORTED


class AlreadyStashedError(DerivedObjectError):
    """The claim record already holds a restored identifier."""

    code = AbortCode.E_ALREADY_STASHED


class AddressInUseError(DerivedObjectError):
    """A live identifier is already bound to the requested address."""

    code = AbortCode.E_ADDRESS_IN_USE


class ObjectNotFoundError(DerivedObjectError):
    """The identifier is not live in the registry."""

    code = AbortCode.E_OBJECT_NOT_FOUND
