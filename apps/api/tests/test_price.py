"""Tests for price truncation and exchange-rate adjustment."""

import logging
from decimal import Decimal

import pytest

from adprice_api.utils.price import (
    ENCRYPTION_SIZE_LIMIT,
    InvalidPriceError,
    NegativePriceError,
    PriceError,
    PriceTooLargeError,
    apply_exchange_rate,
    price_to_str,
    truncate_price,
)


@pytest.mark.parametrize(
    "price,expected",
    [
        ("1.5700000", "1.570000"),
        ("12345678", "12345678"),
        ("1234.56789", "1234.567"),
        ("12345.1234", "12345.12"),
        ("123456.10", "123456.1"),
        ("123456.105", "123456.1"),
        ("1234567.0052", "1234567"),
    ],
)
def test_truncate_price(price, expected):
    """Test truncation keeps every significant digit that fits."""
    result = truncate_price(price)
    assert result == expected
    assert len(result) <= ENCRYPTION_SIZE_LIMIT


@pytest.mark.parametrize("price", ["123456789", "123456.15", "1234567.0152", "1234567.1052"])
def test_truncate_price_too_large(price):
    """Test prices that would lose a non-zero digit raise error."""
    with pytest.raises(PriceTooLargeError, match="unable to truncate"):
        truncate_price(price)


def test_truncate_price_too_large_keeps_price():
    """Test the error carries the offending price."""
    with pytest.raises(PriceTooLargeError) as exc_info:
        truncate_price("123456789")
    assert exc_info.value.price == "123456789"
    assert isinstance(exc_info.value, PriceError)
    assert isinstance(exc_info.value, ValueError)


def test_truncate_price_no_room_left():
    """Test an integer part longer than 8 bytes fails even with zero fraction."""
    with pytest.raises(PriceTooLargeError):
        truncate_price("123456789.00")
    with pytest.raises(PriceTooLargeError):
        truncate_price("12345678.")


def test_truncate_price_multiple_points():
    """Test a string with more than one decimal point is rejected."""
    with pytest.raises(PriceTooLargeError):
        truncate_price("1.234.5678")


def test_truncate_price_short_values_unchanged():
    """Test values within 8 bytes pass through untouched."""
    assert truncate_price("") == ""
    assert truncate_price("0") == "0"
    assert truncate_price(0) == "0"
    assert truncate_price("1.570000") == "1.570000"
    assert truncate_price(40.22) == "40.22"


def test_truncate_price_numeric_inputs():
    """Test numbers are rendered before truncation."""
    assert truncate_price(1.59) == "1.59"
    assert truncate_price(21.0) == "21"
    assert truncate_price(Decimal("1234.56789")) == "1234.567"
    assert truncate_price(12345678) == "12345678"

    with pytest.raises(PriceTooLargeError):
        truncate_price(123456789)


def test_truncate_price_negative():
    """Test negative prices raise error."""
    with pytest.raises(NegativePriceError, match="cannot be negative"):
        truncate_price("-1.00")
    with pytest.raises(NegativePriceError):
        truncate_price(-0.5)


def test_truncate_price_logs_warning(caplog):
    """Test truncation is logged."""
    with caplog.at_level(logging.WARNING, logger="adprice_api.utils.price"):
        truncate_price("1234.56789")

    assert "truncated price 1234.56789 to 1234.567" in caplog.text


def test_truncate_price_short_value_not_logged(caplog):
    """Test nothing is logged when no truncation happens."""
    with caplog.at_level(logging.WARNING, logger="adprice_api.utils.price"):
        truncate_price("40.22")

    assert caplog.records == []


def test_price_to_str():
    """Test rendering of prices."""
    assert price_to_str("1.570000") == "1.570000"
    assert price_to_str(1.59) == "1.59"
    assert price_to_str(5.0) == "5"
    assert price_to_str(0) == "0"
    assert price_to_str(Decimal("2.945")) == "2.945"


@pytest.mark.parametrize("value", [float("nan"), float("inf"), True, None, [1]])
def test_price_to_str_invalid(value):
    """Test non-price values raise error."""
    with pytest.raises(InvalidPriceError):
        price_to_str(value)


@pytest.mark.parametrize(
    "price,rate,expected",
    [
        # 12.03 * 0.32 = 3.8496 (binary float would give 3.8495999999999997)
        (12.03, 0.32, "3.8496"),
        # 22.23 * 0.26 = 5.7798 (binary float would give 5.779800000000001)
        (22.23, 0.26, "5.7798"),
        ("40.22", "0.5", "20.1100"),
        ("1.00005", 1.5, "1.5001"),
        ("1.23456", "1.1", "1.3580"),
    ],
)
def test_apply_exchange_rate(price, rate, expected):
    """Test adjustment rounds half-up to 4 fractional digits."""
    assert apply_exchange_rate(price, rate) == expected


@pytest.mark.parametrize("rate", [None, 1, 1.0, "1", "1.000", 0, ""])
def test_apply_exchange_rate_ignored(rate):
    """Test unset, zero and unit rates leave the price untouched."""
    assert apply_exchange_rate("1.570000", rate) == "1.570000"
    assert apply_exchange_rate(1.59, rate) == "1.59"


def test_apply_exchange_rate_invalid():
    """Test non-numeric prices cannot be adjusted."""
    with pytest.raises(InvalidPriceError):
        apply_exchange_rate("abc", 0.5)

    with pytest.raises(InvalidPriceError):
        apply_exchange_rate("", 0.5)

    with pytest.raises(InvalidPriceError):
        apply_exchange_rate("1.5", "abc")


@pytest.mark.parametrize(
    "price,rendered,truncated",
    [
        (0.00001234, "0.00001234", "0.000012"),
        (1.2345e-07, "0.00000012345", "0.000000"),
        (Decimal("0.00000012345"), "0.00000012345", "0.000000"),
        (Decimal("1.2345E+3"), "1234.5", "1234.5"),
    ],
)
def test_small_numbers_positional(price, rendered, truncated):
    """Test numbers are never rendered in exponent notation before truncation."""
    assert price_to_str(price) == rendered
    assert truncate_price(price) == truncated


@pytest.mark.parametrize("price", ["1e-7", "1.2345E-07", "12E3"])
def test_exponent_strings_rejected(price):
    """Test exponent notation in price strings is an error."""
    with pytest.raises(InvalidPriceError, match="exponent"):
        truncate_price(price)


@pytest.mark.parametrize("price", ["é1.23456789", "1.2€", "１２３"])
def test_non_ascii_price_rejected(price):
    """Test prices must be ASCII so characters and bytes count the same."""
    with pytest.raises(InvalidPriceError, match="ASCII"):
        truncate_price(price)
