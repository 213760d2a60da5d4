"""Keyed encryption of auction prices for creative macros.

Wire format (28 bytes, then unpadded URL-safe base64, 38 characters):

    nonce (16) || ciphertext (8) || integrity tag (4)

- nonce: the ad id, right-padded with '0' or cut to 16 bytes. Public.
- ciphertext: plaintext zero-padded to 8 bytes XOR the first 8 bytes of
  HMAC-SHA1(encryption_key, nonce).
- tag: first 4 bytes of HMAC-SHA1(integrity_key, padded_plaintext || nonce).

The tag is produced for the counterpart that owns the key pair. It is never
verified here.
"""

import base64
import binascii
from dataclasses import dataclass

from adprice_api.crypto.hmac_sha1 import hmac_sha1

# Constants
NONCE_SIZE = 16
CIPHERTEXT_SIZE = 8
SIGNATURE_SIZE = 4
BLOB_SIZE = NONCE_SIZE + CIPHERTEXT_SIZE + SIGNATURE_SIZE
NONCE_PAD_CHAR = b"0"


class CrypterError(Exception):
    """Base exception for price encryption errors."""

    pass


class PlaintextTooLongError(CrypterError):
    """Raised when plaintext exceeds 8 bytes (the price was not truncated)."""

    pass


class MalformedBlobError(CrypterError):
    """Raised when an encrypted price cannot be decoded."""

    pass


@dataclass(frozen=True)
class KeyMaterial:
    """Encryption and integrity keys of one trust boundary."""

    encryption_key: bytes
    integrity_key: bytes

    @classmethod
    def from_base64(cls, encryption_key: str, integrity_key: str) -> "KeyMaterial":
        """
        Build key material from base64 text.

        Raises:
            ValueError: If either key is not valid base64
        """
        return cls(
            encryption_key=base64.b64decode(encryption_key),
            integrity_key=base64.b64decode(integrity_key),
        )

    def fingerprint(self) -> str:
        """Short non-secret identifier for logs and health output."""
        return hmac_sha1(self.integrity_key, self.encryption_key)[:4].hex()


def pad_nonce(nonce_seed: str | bytes) -> bytes:
    """
    Derive the 16-byte nonce from an ad id.

    Examples:
        >>> pad_nonce("123456789")
        b'1234567890000000'
        >>> pad_nonce("123456789123456789")
        b'1234567891234567'
    """
    if isinstance(nonce_seed, str):
        nonce_seed = nonce_seed.encode("utf-8")
    return nonce_seed.ljust(NONCE_SIZE, NONCE_PAD_CHAR)[:NONCE_SIZE]


def urlsafe_b64encode_nopad(raw: bytes) -> str:
    """Base64 with '-' and '_' in place of '+' and '/', trailing '=' stripped."""
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def urlsafe_b64decode_nopad(text: str) -> bytes:
    """
    Inverse of urlsafe_b64encode_nopad.

    Raises:
        MalformedBlobError: If text is not valid unpadded URL-safe base64
    """
    padded = text + "=" * (-len(text) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as e:
        raise MalformedBlobError(f"Invalid encrypted price: {text!r}") from e


def _keystream(keys: KeyMaterial, nonce: bytes) -> bytes:
    return hmac_sha1(keys.encryption_key, nonce)[:CIPHERTEXT_SIZE]


def encrypt_price(keys: KeyMaterial, nonce_seed: str | bytes, plaintext: str) -> str:
    """
    Encrypt a truncated price string.

    Args:
        keys: Key pair of the reading party
        nonce_seed: Ad/impression id
        plaintext: Price string of at most 8 bytes

    Returns:
        38-character URL-safe encrypted price

    Raises:
        PlaintextTooLongError: If plaintext exceeds 8 bytes
    """
    data = plaintext.encode("utf-8")
    if len(data) > CIPHERTEXT_SIZE:
        raise PlaintextTooLongError(
            f"data to encrypt is too long: {len(data)} bytes > {CIPHERTEXT_SIZE}"
        )

    nonce = pad_nonce(nonce_seed)
    padded = data.ljust(CIPHERTEXT_SIZE, b"\x00")

    # XOR of unsigned bytes equals the signed-byte XOR masked with 0xFF
    ciphertext = bytes(p ^ k for p, k in zip(padded, _keystream(keys, nonce)))
    signature = hmac_sha1(keys.integrity_key, padded + nonce)[:SIGNATURE_SIZE]

    return urlsafe_b64encode_nopad(nonce + ciphertext + signature)


def decrypt_price(keys: KeyMaterial, blob: str) -> str:
    """
    Recover the price string from an encrypted price.

    Output stops at the first zero byte. The integrity tag is ignored.

    Raises:
        MalformedBlobError: If blob does not decode to 28 bytes
    """
    raw = urlsafe_b64decode_nopad(blob)
    if len(raw) != BLOB_SIZE:
        raise MalformedBlobError(
            f"Encrypted price must decode to {BLOB_SIZE} bytes, got {len(raw)}"
        )

    nonce = raw[:NONCE_SIZE]
    ciphertext = raw[NONCE_SIZE : NONCE_SIZE + CIPHERTEXT_SIZE]

    plaintext = bytearray()
    for c, k in zip(ciphertext, _keystream(keys, nonce)):
        byte = c ^ k
        if byte == 0:
            break
        plaintext.append(byte)

    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedBlobError("Encrypted price does not decrypt to text under this key") from e


class PriceCrypter:
    """Encrypts and decrypts prices under one fixed key pair."""

    def __init__(self, keys: KeyMaterial, name: str = "default"):
        self.keys = keys
        self.name = name

    def encrypt(self, nonce_seed: str | bytes, plaintext: str) -> str:
        return encrypt_price(self.keys, nonce_seed, plaintext)

    def decrypt(self, blob: str) -> str:
        return decrypt_price(self.keys, blob)

    def __repr__(self) -> str:
        return f"PriceCrypter(name={self.name!r}, key={self.keys.fingerprint()})"
