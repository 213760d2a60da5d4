"""Price utilities for encrypted auction-price macros.

An encrypted price carries at most 8 bytes of ASCII plaintext. Prices arrive
as strings or numbers with arbitrary precision and must be truncated into
that budget without dropping a significant digit.

NEVER use float for exchange-rate arithmetic.
"""

import logging
import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

logger = logging.getLogger(__name__)

# Constants
ENCRYPTION_SIZE_LIMIT = 8  # plaintext bytes per encrypted price
EXCHANGE_RATE_PRECISION = 4  # fractional digits after currency adjustment

PriceValue = Union[str, int, float, Decimal]


class PriceError(ValueError):
    """Base exception for price-related errors."""

    pass


class PriceTooLargeError(PriceError):
    """Raised when a price cannot be fit into 8 bytes without losing a digit."""

    def __init__(self, price: PriceValue):
        self.price = price
        super().__init__(f"unable to truncate {price} to fit into {ENCRYPTION_SIZE_LIMIT} bytes")


class NegativePriceError(PriceError):
    """Raised when a price is negative."""

    pass


class InvalidPriceError(PriceError):
    """Raised when a price is not a decimal number."""

    pass


def price_to_str(price: PriceValue) -> str:
    """
    Render a price the way it is written into creative markup.

    Numbers are written in positional notation. Integral floats lose their
    trailing ".0" and other floats keep their shortest round-trip digits, so
    1.59 renders as "1.59", 5.0 as "5" and 1.234e-05 as "0.00001234".
    Exponent notation in strings is rejected.

    Examples:
        >>> price_to_str(1.59)
        '1.59'
        >>> price_to_str(0)
        '0'
        >>> price_to_str("1.570000")
        '1.570000'
        >>> price_to_str(Decimal("1.2345E-7"))
        '0.00000012345'
    """
    if isinstance(price, bool):
        raise InvalidPriceError(f"Invalid price: {price!r}")
    if isinstance(price, str):
        if "e" in price.lower():
            raise InvalidPriceError(f"Price must not use exponent notation: {price!r}")
        return price
    if isinstance(price, float):
        if not math.isfinite(price):
            raise InvalidPriceError(f"Invalid price: {price!r}")
        if price.is_integer():
            return str(int(price))
        return format(Decimal(repr(price)), "f")
    if isinstance(price, Decimal):
        if not price.is_finite():
            raise InvalidPriceError(f"Invalid price: {price!r}")
        return f"{price:f}"
    if isinstance(price, int):
        return str(price)
    raise InvalidPriceError(f"Invalid price type: {type(price).__name__}")


def truncate_price(price: PriceValue) -> str:
    """
    Truncate a price so its string form fits into 8 bytes.

    Fraction digits are dropped only while the remaining value keeps every
    non-zero digit that fits; anything else is an error.

    Args:
        price: Price as string or number

    Returns:
        Price string of at most 8 bytes

    Raises:
        NegativePriceError: If price is negative
        InvalidPriceError: If price is not ASCII or uses exponent notation
        PriceTooLargeError: If price cannot be represented in 8 bytes

    Examples:
        >>> truncate_price("1234.56789")
        '1234.567'
        >>> truncate_price("123456.10")
        '123456.1'
        >>> truncate_price("1234567.0052")
        '1234567'
    """
    text = price_to_str(price)

    if text.strip().startswith("-"):
        raise NegativePriceError(f"Price cannot be negative: {text}")

    # plaintext is ASCII, so characters and bytes count the same
    if not text.isascii():
        raise InvalidPriceError(f"Price must be ASCII: {text!r}")

    if len(text) <= ENCRYPTION_SIZE_LIMIT:
        return text

    sides = text.split(".")
    if len(sides) != 2:
        raise PriceTooLargeError(price)

    integer_part = sides[0].strip()
    fractional_part = sides[1].strip()
    room = ENCRYPTION_SIZE_LIMIT - len(integer_part)

    # room for '.' and at least two fraction digits
    if room > 2:
        fractional_part = fractional_part[: room - 1]
    # room for '.' and one digit, only if the second digit is zero
    elif room == 2 and fractional_part[1:2] == "0":
        fractional_part = fractional_part[:1]
    # room for the integer part alone, only if the first two digits are zero
    elif 0 <= room < 2 and fractional_part[:2] == "00":
        fractional_part = ""
    else:
        raise PriceTooLargeError(price)

    truncated = integer_part + ("." + fractional_part if fractional_part else "")
    logger.warning(
        f"truncated price {text} to {truncated} to fit into {ENCRYPTION_SIZE_LIMIT} bytes"
    )
    return truncated


def apply_exchange_rate(price: PriceValue, exchange_rate: PriceValue | None) -> str:
    """
    Convert a price into the buyer's currency.

    The rate is applied only when present and not equal to 1. The product
    is rounded half-up to 4 fractional digits.

    Args:
        price: Price in the original currency
        exchange_rate: Multiplier, or None

    Returns:
        Adjusted price string (or the unchanged price string)

    Raises:
        InvalidPriceError: If price or rate is not a decimal number

    Examples:
        >>> apply_exchange_rate(12.03, 0.32)
        '3.8496'
        >>> apply_exchange_rate("1.59", 1.0)
        '1.59'
    """
    if exchange_rate is None or exchange_rate == "":
        return price_to_str(price)

    rate = _to_decimal(exchange_rate)
    # a zero rate counts as unset
    if rate == 0 or rate == 1:
        return price_to_str(price)

    adjusted = _to_decimal(price) * rate
    quantum = Decimal(1).scaleb(-EXCHANGE_RATE_PRECISION)
    try:
        adjusted = adjusted.quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise InvalidPriceError(f"Price {price!r} out of range after exchange rate") from e
    return f"{adjusted:f}"


def _to_decimal(value: PriceValue) -> Decimal:
    """Parse a price or rate into Decimal without passing through binary floats."""
    text = price_to_str(value).strip()
    try:
        result = Decimal(text)
    except InvalidOperation as e:
        raise InvalidPriceError(f"Invalid price: {value!r}") from e
    if not result.is_finite():
        raise InvalidPriceError(f"Invalid price: {value!r}")
    return result
