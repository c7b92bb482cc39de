from __future__ import annotations

import pytest

from pykeywrap import KeyWrapper, salt
from pykeywrap.core import KeyPair, ProviderRegistry, add_provider, new_key_pair
from tests.helpers import FAST_KDF, PASSWORD


@pytest.fixture
def registry() -> ProviderRegistry:
    registry = ProviderRegistry()
    assert add_provider(registry)
    return registry


@pytest.fixture
def salt_value() -> str:
    return salt()


@pytest.fixture
def wrapper(registry: ProviderRegistry, salt_value: str) -> KeyWrapper:
    return KeyWrapper.from_password(
        PASSWORD,
        salt_value,
        kdf=FAST_KDF,
        registry=registry,
    )


@pytest.fixture(scope="session")
def key_pair() -> KeyPair:
    return new_key_pair()
