"""Configuration loading and logging setup."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
from typing import Any

from finsight.models import CURRENCY_PATTERN
from finsight.schema import (
    BASE_REPORTING_CURRENCY,
    DEFAULT_DISPLAY_CURRENCY,
    DEFAULT_FALLBACK_DISPLAY,
    DEFAULT_LOCALE,
)

CONFIG_ENV_VAR = "FINSIGHT_CONFIG"
LOG_LEVEL_ENV_VAR = "LOGGING_LEVEL"
LOG_FORMAT = "%(levelname)s - %(name)s - %(message)s"
DEFAULT_RATE_WORKERS = 8
DEFAULT_TIMEOUT_SECONDS = 5
DEFAULT_RATE_API_URL = "https://api.frankfurter.app"


@dataclass(frozen=True)
class FinsightConfig:
    """Process wide settings threaded into each request context."""

    base_currency: str = BASE_REPORTING_CURRENCY
    default_display_currency: str = DEFAULT_DISPLAY_CURRENCY
    locale: str = DEFAULT_LOCALE
    fallback_display: str = DEFAULT_FALLBACK_DISPLAY
    rate_workers: int = DEFAULT_RATE_WORKERS
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    rate_api_url: str = DEFAULT_RATE_API_URL

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "FinsightConfig":
        """Build a config from a plain mapping, validating currency codes."""
        return cls(
            base_currency=_validate_currency(
                payload.get("base_currency", BASE_REPORTING_CURRENCY), "base_currency"
            ),
            default_display_currency=_validate_currency(
                payload.get("default_display_currency", DEFAULT_DISPLAY_CURRENCY),
                "default_display_currency",
            ),
            locale=str(payload.get("locale", DEFAULT_LOCALE)),
            fallback_display=str(payload.get("fallback_display", DEFAULT_FALLBACK_DISPLAY)),
            rate_workers=max(1, int(payload.get("rate_workers", DEFAULT_RATE_WORKERS))),
            timeout_seconds=int(payload.get("timeout", DEFAULT_TIMEOUT_SECONDS)),
            rate_api_url=str(payload.get("rate_api_url", DEFAULT_RATE_API_URL)).rstrip("/"),
        )


def load_config(path: str | Path | None = None) -> FinsightConfig:
    """Load config file if present, else return defaults."""
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            return FinsightConfig()
        path = env_path
    config_path = Path(path)
    if not config_path.exists():
        return FinsightConfig()
    with config_path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        return FinsightConfig()
    return FinsightConfig.from_dict(payload)


def configure_logging() -> logging.Logger:
    """Configure the package logger from the LOGGING_LEVEL env var."""
    logger = logging.getLogger("finsight")
    log_level = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper()
    logger.setLevel(getattr(logging, log_level, logging.INFO))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


def _validate_currency(code: object, field_name: str) -> str:
    if not isinstance(code, str) or not CURRENCY_PATTERN.match(code):
        raise ValueError(f"Invalid currency code for {field_name}: {code}")
    return code
