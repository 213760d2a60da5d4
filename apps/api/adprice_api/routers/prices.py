"""Prices API router - truncate, encrypt and decrypt single prices.

Decryption exists for verification; the integrity tag is not checked.
"""

from fastapi import APIRouter, Depends

from adprice_api.config import get_external_crypter, get_internal_crypter
from adprice_api.crypto.price_crypter import PriceCrypter
from adprice_api.schemas import (
    KeyPair,
    PriceDecryptRequest,
    PriceDecryptResponse,
    PriceEncryptRequest,
    PriceEncryptResponse,
    PriceTruncateRequest,
    PriceTruncateResponse,
)
from adprice_api.utils.price import price_to_str, truncate_price

router = APIRouter(prefix="/v1/prices", tags=["prices"])


def _select(
    key_pair: KeyPair, external: PriceCrypter, internal: PriceCrypter
) -> PriceCrypter:
    return external if key_pair == KeyPair.EXTERNAL else internal


@router.post("/truncate", response_model=PriceTruncateResponse)
async def truncate(request: PriceTruncateRequest) -> PriceTruncateResponse:
    """Truncate a price to its 8-byte plaintext form."""
    return PriceTruncateResponse(
        price=price_to_str(request.price),
        truncated=truncate_price(request.price),
    )


@router.post("/encrypt", response_model=PriceEncryptResponse)
async def encrypt(
    request: PriceEncryptRequest,
    external: PriceCrypter = Depends(get_external_crypter),
    internal: PriceCrypter = Depends(get_internal_crypter),
) -> PriceEncryptResponse:
    """Truncate, then encrypt a price under the selected key pair."""
    truncated = truncate_price(request.price)
    crypter = _select(request.key_pair, external, internal)
    return PriceEncryptResponse(
        price=truncated,
        encrypted=crypter.encrypt(request.nonce_seed, truncated),
    )


@router.post("/decrypt", response_model=PriceDecryptResponse)
async def decrypt(
    request: PriceDecryptRequest,
    external: PriceCrypter = Depends(get_external_crypter),
    internal: PriceCrypter = Depends(get_internal_crypter),
) -> PriceDecryptResponse:
    """Decrypt an encrypted price under the selected key pair."""
    crypter = _select(request.key_pair, external, internal)
    return PriceDecryptResponse(price=crypter.decrypt(request.blob))
