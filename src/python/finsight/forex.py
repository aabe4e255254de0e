"""Exchange rate resolution through the base reporting currency."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import datetime as dt
import logging
import math
from typing import Iterable

import requests

from finsight.config import (
    DEFAULT_RATE_API_URL,
    DEFAULT_RATE_WORKERS,
    DEFAULT_TIMEOUT_SECONDS,
)
from finsight.exceptions import ErrorKind, TransportError
from finsight.persistence import RateSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLookup:
    """Outcome of a single rate resolution.

    ``rate`` is set only for a finite positive rate. Otherwise ``kind`` names
    the failure and ``error`` holds the transport error when there was one.
    """
    rate: float | None
    kind: ErrorKind | None = None
    error: TransportError | None = None

    @property
    def found(self) -> bool:
        return self.rate is not None


@dataclass(frozen=True)
class RateBatch:
    """Rates from the base currency keyed by target code.

    The map may be sparse. ``error`` is set only when nothing but the base
    currency resolved and at least one lookup failed in transport.
    """
    rates: dict[str, float]
    error: TransportError | None = None
    missing: list[str] = field(default_factory=list)


class RateResolver:
    """Resolve a single rate, mapping store outcomes to a RateLookup."""

    def __init__(self, source: RateSource) -> None:
        self.source = source

    def resolve(self, date: dt.date, source_code: str, target_code: str) -> RateLookup:
        """Resolve units of target_code per one source_code on date."""
        if source_code == target_code:
            logger.debug("Same currency %s, skipping rate lookup", source_code)
            return RateLookup(rate=1.0)

        try:
            rate = self.source.lookup_rate(date, source_code, target_code)
        except TransportError as exc:
            logger.error(
                "Error fetching exchange rate from %s to %s for date %s: %s",
                source_code,
                target_code,
                date.isoformat(),
                exc,
            )
            return RateLookup(rate=None, kind=ErrorKind.TRANSPORT_FAILURE, error=exc)
        except Exception as exc:
            logger.exception(
                "Unexpected failure looking up %s to %s for date %s",
                source_code,
                target_code,
                date.isoformat(),
            )
            error = TransportError(
                "Rate lookup failed",
                {"source": source_code, "target": target_code, "error": str(exc)},
            )
            return RateLookup(rate=None, kind=ErrorKind.TRANSPORT_FAILURE, error=error)

        if rate is None:
            logger.warning(
                "No exchange rate found for %s to %s on %s",
                source_code,
                target_code,
                date.isoformat(),
            )
            return RateLookup(rate=None, kind=ErrorKind.NOT_FOUND)

        try:
            rate = float(rate)
        except (TypeError, ValueError):
            rate = math.nan
        if not math.isfinite(rate) or rate <= 0:
            logger.warning(
                "Ignoring invalid exchange rate %s for %s to %s on %s",
                rate,
                source_code,
                target_code,
                date.isoformat(),
            )
            return RateLookup(rate=None, kind=ErrorKind.ZERO_OR_INVALID_RATE)
        return RateLookup(rate=rate)


class RateBatchResolver:
    """Resolve rates from a base currency to many targets concurrently."""

    def __init__(self, resolver: RateResolver, max_workers: int = DEFAULT_RATE_WORKERS) -> None:
        self.resolver = resolver
        self.max_workers = max(1, max_workers)

    def resolve_many(
        self,
        date: dt.date,
        target_codes: Iterable[str],
        base_code: str,
    ) -> RateBatch:
        """Resolve base to each target, omitting targets that fail."""
        targets = list(dict.fromkeys(target_codes))
        rates: dict[str, float] = {}
        if base_code in targets:
            rates[base_code] = 1.0
        pending = [code for code in targets if code != base_code]
        if not pending:
            return RateBatch(rates=rates)

        workers = min(self.max_workers, len(pending))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                code: executor.submit(self.resolver.resolve, date, base_code, code)
                for code in pending
            }
            lookups = {code: future.result() for code, future in futures.items()}

        first_error: TransportError | None = None
        missing: list[str] = []
        for code in pending:
            lookup = lookups[code]
            if lookup.found:
                rates[code] = lookup.rate
                continue
            missing.append(code)
            if lookup.error is not None and first_error is None:
                first_error = lookup.error
            logger.warning(
                "Rate not found for %s -> %s on %s. It will be omitted from results.",
                base_code,
                code,
                date.isoformat(),
            )

        resolved = len(pending) - len(missing)
        if resolved == 0 and first_error is not None:
            return RateBatch(rates=rates, error=first_error, missing=missing)
        return RateBatch(rates=rates, missing=missing)


class ApiRateSource(RateSource):
    """Look up historical rates from a Frankfurter compatible HTTP API."""

    def __init__(
        self,
        base_url: str = DEFAULT_RATE_API_URL,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self._cache: dict[tuple[str, str, str], float | None] = {}

    def lookup_rate(
        self,
        date: dt.date,
        source_code: str,
        target_code: str,
    ) -> float | None:
        if source_code == target_code:
            return 1.0
        cache_key = (date.isoformat(), source_code, target_code)
        if cache_key in self._cache:
            return self._cache[cache_key]
        rate = self._fetch_rate(date, source_code, target_code)
        self._cache[cache_key] = rate
        return rate

    def _fetch_rate(self, date: dt.date, source_code: str, target_code: str) -> float | None:
        url = f"{self.base_url}/{date.isoformat()}"
        try:
            response = self.session.get(
                url,
                params={"from": source_code, "to": target_code},
                timeout=self.timeout_seconds,
            )
            if response.status_code == 404:
                return None
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise TransportError(
                "Rate API unavailable",
                {"url": url, "error": str(exc)},
            ) from exc

        rates = payload.get("rates") if isinstance(payload, dict) else None
        if not isinstance(rates, dict):
            raise TransportError("Rate API response missing rates", {"url": url})
        value = rates.get(target_code)
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.warning("Unparsable rate %r for %s to %s", value, source_code, target_code)
            return None
