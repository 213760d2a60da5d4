"""Utility functions and helpers."""

from adprice_api.utils.logging_config import JsonFormatter, configure_json_logging
from adprice_api.utils.price import (
    InvalidPriceError,
    NegativePriceError,
    PriceError,
    PriceTooLargeError,
    apply_exchange_rate,
    price_to_str,
    truncate_price,
)

__all__ = [
    "JsonFormatter",
    "configure_json_logging",
    "PriceError",
    "PriceTooLargeError",
    "NegativePriceError",
    "InvalidPriceError",
    "apply_exchange_rate",
    "price_to_str",
    "truncate_price",
]
