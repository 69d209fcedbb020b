"""
Attached key-value storage scoped per owner.

The claim ledger needs four operations from its backing store:
``exists``, ``insert``, ``borrow_mut`` and ``field_count``. Anything satisfying
``AttachedStore`` can back a ledger; ``InMemoryAttachedStore`` is the default.
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, Optional, Protocol

from derived_objects.identity import Address


class AttachedStoreError(KeyError):
    """Base class for attached-store contract violations."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class FieldAlreadyExistsError(AttachedStoreError):
    """``insert`` on a field that is already present."""


class FieldNotFoundError(AttachedStoreError):
    """``borrow_mut`` on a field that is not present."""


class AttachedStore(Protocol):
    def exists(self, owner: Address, key: Hashable) -> bool:
        ...

    def insert(self, owner: Address, key: Hashable, value: Any) -> None:
        ...

    def borrow_mut(self, owner: Address, key: Hashable) -> Any:
        ...

    def field_count(self, owner: Address, field_type: Optional[type] = None) -> int:
        ...


class InMemoryAttachedStore:
    """
    Dictionary-backed attached store.

    Values are returned by reference from ``borrow_mut``; callers mutate them in
    place. There is deliberately no removal operation.
    """

    def __init__(self) -> None:
        self._fields: Dict[Address, Dict[Hashable, Any]] = {}

    def exists(self, owner: Address, key: Hashable) -> bool:
        return key in self._fields.get(owner, {})

    def insert(self, owner: Address, key: Hashable, value: Any) -> None:
        fields = self._fields.setdefault(owner, {})
        if key in fields:
            raise FieldAlreadyExistsError(f"field {key!r} already attached to {owner.hex()}")
        fields[key] = value

    def borrow_mut(self, owner: Address, key: Hashable) -> Any:
        try:
            return self._fields[owner][key]
        except KeyError:
            raise FieldNotFoundError(f"no field {key!r} attached to {owner.hex()}") from None

    def field_count(self, owner: Address, field_type: Optional[type] = None) -> int:
        """Number of fields attached to ``owner``, optionally only keys of ``field_type``."""
        fields = self._fields.get(owner, {})
        if field_type is None:
            return len(fields)
        return sum(1 for key in fields if isinstance(key, field_type))
