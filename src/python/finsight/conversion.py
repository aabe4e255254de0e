"""Display conversion and locale aware currency formatting."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
import logging
import math
from typing import Mapping

from babel import Locale, UnknownLocaleError

from finsight.config import FinsightConfig
from finsight.models import Conversion, Currency
from finsight.registry import CurrencyRegistry, normalize_code
from finsight.schema import (
    BASE_REPORTING_CURRENCY,
    DEFAULT_FALLBACK_DISPLAY,
    DEFAULT_LOCALE,
)

logger = logging.getLogger(__name__)

MISSING_INFO_MARKER = "(Info?)"


def format_money(value: float, currency: Currency, locale: str = DEFAULT_LOCALE) -> str:
    """Format value in currency using the locale's standard currency pattern.

    The fraction precision is pinned to the currency's decimal digits. Never
    raises; a rejected locale or code falls back to fixed point text.
    """
    digits = currency.decimal_digits
    try:
        parsed_locale = Locale.parse(locale)
        pattern = copy.copy(parsed_locale.currency_formats["standard"])
        pattern.frac_prec = (digits, digits)
        return pattern.apply(
            value,
            parsed_locale,
            currency=currency.code,
            currency_digits=False,
        )
    except (UnknownLocaleError, KeyError, TypeError, ValueError) as exc:
        logger.error("Currency formatting failed for %s: %s", currency.code, exc)
        return f"{value:.{digits}f} {currency.symbol or currency.code}"


def convert_amount(
    amount: float | int | None,
    source_code: str,
    target_code: str,
    registry: CurrencyRegistry,
    rates: Mapping[str, float] | None,
    *,
    base_code: str = BASE_REPORTING_CURRENCY,
    locale: str = DEFAULT_LOCALE,
    fallback_display: str = DEFAULT_FALLBACK_DISPLAY,
) -> Conversion:
    """Convert amount into target_code through the base currency and format it.

    ``rates`` maps a currency code to units of that currency per one unit of
    the base currency. Missing data yields the fallback, never an exception.
    """
    fallback = Conversion(value=None, formatted=fallback_display, ok=False)
    if amount is None or isinstance(amount, bool):
        return fallback
    try:
        amount = float(amount)
    except (TypeError, ValueError):
        return fallback
    if math.isnan(amount):
        return fallback

    source_code = normalize_code(source_code)
    target_code = normalize_code(target_code)
    rates = rates or {}
    target = registry.get(target_code)
    if target is None:
        logger.warning("Target currency info for %s not found", target_code)
        return Conversion(
            value=None,
            formatted=f"{amount:.2f} {target_code} {MISSING_INFO_MARKER}",
            ok=False,
        )

    converted = amount
    if source_code != target_code:
        if source_code == base_code:
            amount_in_base = amount
        else:
            source_rate = rates.get(source_code)
            if not source_rate:
                logger.warning(
                    "Missing or zero exchange rate %s -> %s; cannot convert %s",
                    base_code,
                    source_code,
                    source_code,
                )
                return fallback
            amount_in_base = amount / source_rate

        if target_code == base_code:
            converted = amount_in_base
        else:
            target_rate = rates.get(target_code)
            if target_rate is None:
                logger.warning(
                    "Missing exchange rate %s -> %s; cannot convert to %s",
                    base_code,
                    target_code,
                    target_code,
                )
                return fallback
            converted = amount_in_base * target_rate

    if not math.isfinite(converted):
        logger.warning(
            "Conversion of %s %s to %s produced %s",
            amount,
            source_code,
            target_code,
            converted,
        )
        return fallback

    return Conversion(value=converted, formatted=format_money(converted, target, locale))


@dataclass(frozen=True)
class ConversionContext:
    """Request scoped bundle of currency metadata and base rates.

    Built once per request and treated as read-only afterwards.
    """
    registry: CurrencyRegistry
    rates: Mapping[str, float]
    base_currency: str = BASE_REPORTING_CURRENCY
    display_currency: str = BASE_REPORTING_CURRENCY
    locale: str = DEFAULT_LOCALE
    fallback_display: str = DEFAULT_FALLBACK_DISPLAY
    missing_rates: list[str] = field(default_factory=list)

    @classmethod
    def from_config(
        cls,
        config: FinsightConfig,
        registry: CurrencyRegistry,
        rates: Mapping[str, float],
        display_currency: str | None = None,
        missing_rates: list[str] | None = None,
    ) -> "ConversionContext":
        """Build a context from configuration values."""
        return cls(
            registry=registry,
            rates=dict(rates),
            base_currency=config.base_currency,
            display_currency=display_currency or config.default_display_currency,
            locale=config.locale,
            fallback_display=config.fallback_display,
            missing_rates=list(missing_rates or []),
        )

    def convert(
        self,
        amount: float | int | None,
        source_code: str | None = None,
        target_code: str | None = None,
    ) -> Conversion:
        """Convert from source (default base) to target (default display)."""
        return convert_amount(
            amount,
            source_code or self.base_currency,
            target_code or self.display_currency,
            self.registry,
            self.rates,
            base_code=self.base_currency,
            locale=self.locale,
            fallback_display=self.fallback_display,
        )

    def display(self, amount: float | int | None, source_code: str | None = None) -> str:
        """Return amount formatted in the display currency."""
        return self.convert(amount, source_code).formatted
