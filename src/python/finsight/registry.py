"""In-memory index of currency metadata."""

from __future__ import annotations

from typing import Iterable, Iterator

from finsight.exceptions import NotFoundError
from finsight.models import Currency


def normalize_code(code: str) -> str:
    """Return code stripped and upper-cased, the form currencies are keyed by."""
    return code.strip().upper() if isinstance(code, str) else code


class CurrencyRegistry:
    """Read-only lookup of currencies by code, built once per request."""

    def __init__(self, currencies: Iterable[Currency]) -> None:
        self._currencies: dict[str, Currency] = {}
        for currency in currencies:
            self._currencies[currency.code] = currency

    def __contains__(self, code: object) -> bool:
        return normalize_code(code) in self._currencies

    def __iter__(self) -> Iterator[Currency]:
        return iter(self._currencies.values())

    def __len__(self) -> int:
        return len(self._currencies)

    def get(self, code: str) -> Currency | None:
        """Return the currency for code, or None when unknown."""
        return self._currencies.get(normalize_code(code))

    def require(self, code: str) -> Currency:
        """Return the currency for code or raise NotFoundError."""
        currency = self.get(code)
        if currency is None:
            raise NotFoundError(f"Currency {code} not found", {"code": code})
        return currency

    def codes(self) -> list[str]:
        return list(self._currencies)

    def active(self) -> list[Currency]:
        return [currency for currency in self._currencies.values() if currency.is_active]
