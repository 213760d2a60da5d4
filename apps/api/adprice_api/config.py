"""Service configuration from environment.

Key pairs are provisioned as base64 text at process start and never change
while the process runs. Rotation is a redeploy.
"""

import binascii
import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from adprice_api.crypto.price_crypter import KeyMaterial, PriceCrypter

logger = logging.getLogger(__name__)

# Published key pairs of the header-bidding adapter; override in deployment
DEFAULT_EXTERNAL_ENC_KEY = "c2xzRWh5NXhpZmxndTRxYWZjY2NqZGNhTW1uZGZya3Y="
DEFAULT_EXTERNAL_INT_KEY = "eWRpdkFoa2tub3p5b2dscGttamIySGhkZ21jcmg0Znk="
DEFAULT_INTERNAL_ENC_KEY = "1AE180CBC19A8CFEB7E1FCC000A10F5D892A887A2D9="
DEFAULT_INTERNAL_INT_KEY = "0379698055BD41FD05AC543A3AAAD6589BC6E1B3626="


class ConfigError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


@dataclass(frozen=True)
class Settings:
    """Process-wide, read-only settings."""

    external_keys: KeyMaterial
    internal_keys: KeyMaterial


def _load_key_pair(prefix: str, default_enc: str, default_int: str) -> KeyMaterial:
    enc_var = f"ADPRICE_{prefix}_ENC_KEY"
    int_var = f"ADPRICE_{prefix}_INT_KEY"
    try:
        keys = KeyMaterial.from_base64(
            os.getenv(enc_var, default_enc),
            os.getenv(int_var, default_int),
        )
    except (binascii.Error, ValueError) as e:
        raise ConfigError(f"{enc_var}/{int_var} must be base64 encoded") from e

    if not keys.encryption_key or not keys.integrity_key:
        raise ConfigError(f"{enc_var}/{int_var} must not be empty")
    return keys


def load_settings() -> Settings:
    """
    Read settings from environment variables.

    Environment:
        ADPRICE_EXTERNAL_ENC_KEY, ADPRICE_EXTERNAL_INT_KEY: external key pair
        ADPRICE_INTERNAL_ENC_KEY, ADPRICE_INTERNAL_INT_KEY: internal key pair

    Raises:
        ConfigError: If a key is invalid or both pairs are the same
    """
    external_keys = _load_key_pair("EXTERNAL", DEFAULT_EXTERNAL_ENC_KEY, DEFAULT_EXTERNAL_INT_KEY)
    internal_keys = _load_key_pair("INTERNAL", DEFAULT_INTERNAL_ENC_KEY, DEFAULT_INTERNAL_INT_KEY)

    if external_keys == internal_keys:
        raise ConfigError("External and internal key pairs must differ")

    return Settings(
        external_keys=external_keys,
        internal_keys=internal_keys,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process."""
    settings = load_settings()
    logger.info(
        f"Loaded key pairs external={settings.external_keys.fingerprint()} "
        f"internal={settings.internal_keys.fingerprint()}"
    )
    return settings


def get_external_crypter() -> PriceCrypter:
    """FastAPI dependency: crypter for prices readable by the buyer."""
    return PriceCrypter(get_settings().external_keys, name="external")


def get_internal_crypter() -> PriceCrypter:
    """FastAPI dependency: crypter for prices readable only by our backend."""
    return PriceCrypter(get_settings().internal_keys, name="internal")
