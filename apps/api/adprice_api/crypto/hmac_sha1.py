"""SHA-1 and HMAC-SHA1 primitives.

Keystream and integrity-tag bytes for encrypted prices are taken from these
digests, so output must be byte-identical to FIPS 180 SHA-1 and RFC 2104
HMAC-SHA1. Both come straight from hashlib/hmac.
"""

import hashlib
import hmac

DIGEST_SIZE = 20


def sha1_digest(data: bytes) -> bytes:
    """Return the 20-byte SHA-1 digest of data."""
    return hashlib.sha1(data).digest()


def hmac_sha1(key: bytes, data: bytes) -> bytes:
    """
    Compute HMAC-SHA1 of data under key.

    Keys longer than the 64-byte block size are hashed down first, as
    RFC 2104 requires (handled by the hmac module).

    Args:
        key: Secret key bytes
        data: Message bytes

    Returns:
        20-byte MAC
    """
    return hmac.new(key, data, hashlib.sha1).digest()
