"""Pytest configuration and fixtures."""

import os

# Keep pytest's log capture on the root logger
os.environ.setdefault("ADPRICE_JSON_LOGS", "false")

import pytest
from fastapi.testclient import TestClient

from adprice_api.config import (
    DEFAULT_EXTERNAL_ENC_KEY,
    DEFAULT_EXTERNAL_INT_KEY,
    DEFAULT_INTERNAL_ENC_KEY,
    DEFAULT_INTERNAL_INT_KEY,
    get_settings,
)
from adprice_api.crypto.price_crypter import KeyMaterial, PriceCrypter

# Nonce seed used throughout the published adapter vectors
AD_ID = "123456789123456789"


@pytest.fixture
def external_keys() -> KeyMaterial:
    """External key pair (readable by the buyer)."""
    return KeyMaterial.from_base64(DEFAULT_EXTERNAL_ENC_KEY, DEFAULT_EXTERNAL_INT_KEY)


@pytest.fixture
def internal_keys() -> KeyMaterial:
    """Internal key pair (readable only by our backend)."""
    return KeyMaterial.from_base64(DEFAULT_INTERNAL_ENC_KEY, DEFAULT_INTERNAL_INT_KEY)


@pytest.fixture
def external(external_keys: KeyMaterial) -> PriceCrypter:
    return PriceCrypter(external_keys, name="external")


@pytest.fixture
def internal(internal_keys: KeyMaterial) -> PriceCrypter:
    return PriceCrypter(internal_keys, name="internal")


@pytest.fixture
def client() -> TestClient:
    """
    Test client against the application with default key pairs.

    Settings are cached per process; the cache is cleared so environment
    changes made by other tests do not leak in.
    """
    from adprice_api.main import app

    get_settings.cache_clear()
    try:
        yield TestClient(app)
    finally:
        get_settings.cache_clear()
