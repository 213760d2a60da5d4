"""Creatives API router - POST /v1/creatives/render."""

import logging

from fastapi import APIRouter, Depends

from adprice_api.config import get_external_crypter, get_internal_crypter
from adprice_api.crypto.price_crypter import PriceCrypter
from adprice_api.macros import render_creative
from adprice_api.schemas import CreativeRenderRequest, CreativeRenderResponse

router = APIRouter(prefix="/v1/creatives", tags=["creatives"])
logger = logging.getLogger(__name__)


@router.post("/render", response_model=CreativeRenderResponse)
async def render(
    request: CreativeRenderRequest,
    external: PriceCrypter = Depends(get_external_crypter),
    internal: PriceCrypter = Depends(get_internal_crypter),
) -> CreativeRenderResponse:
    """
    Substitute auction-price macros in creative markup.

    All encrypted macros share ad_id as nonce. Fails as a whole (422) when
    any price cannot be fit into 8 bytes.
    """
    markup = render_creative(
        request.markup,
        ad_id=request.ad_id,
        auction_price=request.auction_price,
        exchange_rate=request.exchange_rate,
        first_bid=request.first_bid,
        second_bid=request.second_bid,
        third_bid=request.third_bid,
        external=external,
        internal=internal,
    )
    logger.info(f"Rendered creative for ad {request.ad_id}")
    return CreativeRenderResponse(ad_id=request.ad_id, markup=markup)
