# tests/conftest.py
import pytest

from derived_objects import DerivedNamespace, IdentityRegistry, NamespaceConfig, RestorePolicy


def _namespace(policy: RestorePolicy) -> DerivedNamespace:
    config = NamespaceConfig(restore_policy=policy)
    return DerivedNamespace(registry=IdentityRegistry(), config=config)


@pytest.fixture
def namespace() -> DerivedNamespace:
    """Namespace with the default (disabled) restore policy."""
    return _namespace(RestorePolicy.DISABLED)


@pytest.fixture
def atomic_namespace() -> DerivedNamespace:
    return _namespace(RestorePolicy.DISABLED_ATOMIC)


@pytest.fixture
def enabled_namespace() -> DerivedNamespace:
    return _namespace(RestorePolicy.ENABLED)


@pytest.fixture
def parent(namespace):
    return namespace.new_parent()
