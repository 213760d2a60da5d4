"""Price encryption module."""

from adprice_api.crypto.hmac_sha1 import hmac_sha1, sha1_digest
from adprice_api.crypto.price_crypter import (
    CrypterError,
    KeyMaterial,
    MalformedBlobError,
    PlaintextTooLongError,
    PriceCrypter,
    decrypt_price,
    encrypt_price,
    pad_nonce,
)

__all__ = [
    "CrypterError",
    "KeyMaterial",
    "MalformedBlobError",
    "PlaintextTooLongError",
    "PriceCrypter",
    "decrypt_price",
    "encrypt_price",
    "hmac_sha1",
    "pad_nonce",
    "sha1_digest",
]
