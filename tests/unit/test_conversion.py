from __future__ import annotations

import math

import pytest

from finsight.conversion import ConversionContext, convert_amount, format_money
from finsight.models import Currency


def test_identity_conversion_skips_rates(registry) -> None:
    result = convert_amount(123.45, "EUR", "EUR", registry, {})

    assert result.ok
    assert result.value == 123.45
    assert result.formatted == "€123.45"


def test_base_to_target_multiplies_by_rate(registry, rates) -> None:
    result = convert_amount(100, "USD", "JPY", registry, rates)

    assert result.value == pytest.approx(15000.0)
    assert result.formatted == "¥15,000"


def test_source_to_base_divides_by_rate(registry, rates) -> None:
    result = convert_amount(90, "EUR", "USD", registry, rates)

    assert result.value == pytest.approx(100.0)
    assert result.formatted == "$100.00"


def test_cross_conversion_goes_through_base(registry, rates) -> None:
    direct = convert_amount(45, "EUR", "JPY", registry, rates)
    to_base = convert_amount(45, "EUR", "USD", registry, rates)
    via_base = convert_amount(to_base.value, "USD", "JPY", registry, rates)

    assert direct.value == pytest.approx(7500.0)
    assert direct.value == pytest.approx(via_base.value)


def test_missing_rates_return_fallback(registry) -> None:
    result = convert_amount(100, "EUR", "JPY", registry, {})

    assert not result.ok
    assert result.value is None
    assert result.formatted == "N/A"


def test_missing_target_rate_returns_fallback(registry) -> None:
    result = convert_amount(100, "USD", "EUR", registry, {"USD": 1.0})

    assert result.formatted == "N/A"


def test_zero_source_rate_returns_fallback(registry) -> None:
    result = convert_amount(100, "EUR", "USD", registry, {"EUR": 0.0})

    assert result.formatted == "N/A"


@pytest.mark.parametrize("amount", [None, math.nan, "abc"])
def test_unusable_amount_returns_fallback(registry, rates, amount) -> None:
    result = convert_amount(amount, "USD", "EUR", registry, rates, fallback_display="--")

    assert result.formatted == "--"
    assert result.value is None


def test_unknown_target_currency_is_flagged(registry, rates) -> None:
    result = convert_amount(100, "USD", "CHF", registry, rates)

    assert not result.ok
    assert result.formatted == "100.00 CHF (Info?)"


def test_format_money_uses_currency_digits() -> None:
    jpy = Currency(code="JPY", name="Japanese Yen", symbol="¥", decimal_digits=0)
    bhd = Currency(code="BHD", name="Bahraini Dinar", symbol="BD", decimal_digits=3)

    assert format_money(1234.4, jpy) == "¥1,234"
    assert format_money(1.5, bhd).endswith("1.500")


def test_format_money_falls_back_on_unknown_locale() -> None:
    eur = Currency(code="EUR", name="Euro", symbol="€", decimal_digits=2)

    assert format_money(12.5, eur, locale="xx_YY") == "12.50 €"


def test_context_displays_in_preferred_currency(context: ConversionContext) -> None:
    assert context.display(1300) == "€1,170.00"
    assert context.display(90, "EUR") == "€90.00"
    assert context.convert(None).formatted == context.fallback_display


def test_codes_are_case_insensitive(registry, rates) -> None:
    result = convert_amount(100, " usd", "eur ", registry, rates)

    assert result.ok
    assert result.formatted == "€90.00"
