"""Auction-price macro substitution for creative markup.

Creative markup returned by the exchange carries placeholder tokens. Every
token is resolved up front, then all occurrences are replaced textually.
If any price cannot be resolved the whole creative fails; markup is never
returned half-substituted.

Key pairs:
- external: ${AUCTION_PRICE:ENC}, readable by the buyer
- internal: ${SSP_AUCTION_PRICE:ENC} and the competing-bid macros, readable
  only by our own backend
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from adprice_api.crypto.price_crypter import PriceCrypter
from adprice_api.utils.price import (
    PriceError,
    PriceValue,
    apply_exchange_rate,
    truncate_price,
)

logger = logging.getLogger(__name__)

# Macro tokens
AUCTION_PRICE = "${AUCTION_PRICE}"
AUCTION_PRICE_ENC = "${AUCTION_PRICE:ENC}"
SSP_AUCTION_PRICE_ENC = "${SSP_AUCTION_PRICE:ENC}"
FIRST_BID_ENC = "${FIRST_BID:ENC}"
SECOND_BID_ENC = "${SECOND_BID:ENC}"
THIRD_BID_ENC = "${THIRD_BID:ENC}"

MACROS = (
    AUCTION_PRICE_ENC,
    SSP_AUCTION_PRICE_ENC,
    FIRST_BID_ENC,
    SECOND_BID_ENC,
    THIRD_BID_ENC,
    AUCTION_PRICE,
)

_MACRO_PATTERN = re.compile("|".join(re.escape(token) for token in MACROS))


class MacroResolutionError(Exception):
    """Raised when a macro price cannot be resolved.

    Attributes:
        macro: Token that failed
        price: Offending price value
    """

    def __init__(self, macro: str, price: PriceValue, cause: PriceError):
        self.macro = macro
        self.price = price
        super().__init__(f"Cannot resolve {macro} for price {price!r}: {cause}")


@dataclass(frozen=True)
class MacroValues:
    """Resolved value for every recognized macro of one creative."""

    auction_price: str
    auction_price_enc: str
    ssp_auction_price_enc: str
    first_bid_enc: str = ""
    second_bid_enc: str = ""
    third_bid_enc: str = ""

    def as_mapping(self) -> dict[str, str]:
        return {
            AUCTION_PRICE: self.auction_price,
            AUCTION_PRICE_ENC: self.auction_price_enc,
            SSP_AUCTION_PRICE_ENC: self.ssp_auction_price_enc,
            FIRST_BID_ENC: self.first_bid_enc,
            SECOND_BID_ENC: self.second_bid_enc,
            THIRD_BID_ENC: self.third_bid_enc,
        }


def _truncate(macro: str, price: PriceValue) -> str:
    try:
        return truncate_price(price)
    except PriceError as e:
        raise MacroResolutionError(macro, price, e) from e


def _encrypt_bid(
    macro: str, bid: Optional[PriceValue], ad_id: str, crypter: PriceCrypter
) -> str:
    if bid is None:
        return ""
    return crypter.encrypt(ad_id, _truncate(macro, bid))


def resolve_macros(
    *,
    ad_id: str,
    auction_price: PriceValue,
    external: PriceCrypter,
    internal: PriceCrypter,
    exchange_rate: Optional[PriceValue] = None,
    first_bid: Optional[PriceValue] = None,
    second_bid: Optional[PriceValue] = None,
    third_bid: Optional[PriceValue] = None,
) -> MacroValues:
    """
    Compute the value of every macro for one creative.

    The external and plaintext auction price are converted with the exchange
    rate; the internal one keeps the original currency.

    Args:
        ad_id: Ad/impression id, nonce seed shared by all encrypted macros
        auction_price: Clearing price
        external: Crypter holding the external key pair
        internal: Crypter holding the internal key pair
        exchange_rate: Currency multiplier (ignored when None or 1)
        first_bid, second_bid, third_bid: Competing bids, None when absent

    Returns:
        MacroValues

    Raises:
        MacroResolutionError: If any price cannot be truncated
    """
    try:
        adjusted = apply_exchange_rate(auction_price, exchange_rate)
    except PriceError as e:
        raise MacroResolutionError(AUCTION_PRICE_ENC, auction_price, e) from e

    auction_text = _truncate(AUCTION_PRICE_ENC, adjusted)
    ssp_auction_text = _truncate(SSP_AUCTION_PRICE_ENC, auction_price)

    return MacroValues(
        auction_price=auction_text,
        auction_price_enc=external.encrypt(ad_id, auction_text),
        ssp_auction_price_enc=internal.encrypt(ad_id, ssp_auction_text),
        first_bid_enc=_encrypt_bid(FIRST_BID_ENC, first_bid, ad_id, internal),
        second_bid_enc=_encrypt_bid(SECOND_BID_ENC, second_bid, ad_id, internal),
        third_bid_enc=_encrypt_bid(THIRD_BID_ENC, third_bid, ad_id, internal),
    )


def substitute_macros(markup: str, values: MacroValues) -> str:
    """Replace every occurrence of every recognized macro in markup."""
    mapping = values.as_mapping()
    return _MACRO_PATTERN.sub(lambda match: mapping[match.group(0)], markup)


def render_creative(
    markup: str,
    *,
    ad_id: str,
    auction_price: PriceValue,
    external: PriceCrypter,
    internal: PriceCrypter,
    exchange_rate: Optional[PriceValue] = None,
    first_bid: Optional[PriceValue] = None,
    second_bid: Optional[PriceValue] = None,
    third_bid: Optional[PriceValue] = None,
) -> str:
    """
    Return markup with all auction-price macros substituted.

    Arguments are those of resolve_macros. A creative with no recognized
    token is returned unchanged.

    Raises:
        MacroResolutionError: If any price cannot be truncated
    """
    try:
        values = resolve_macros(
            ad_id=ad_id,
            auction_price=auction_price,
            external=external,
            internal=internal,
            exchange_rate=exchange_rate,
            first_bid=first_bid,
            second_bid=second_bid,
            third_bid=third_bid,
        )
    except MacroResolutionError as e:
        logger.error(f"Creative for ad {ad_id} not rendered: {e}")
        raise

    return substitute_macros(markup, values)
