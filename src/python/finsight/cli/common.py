"""Shared CLI helpers."""

from __future__ import annotations

import datetime as dt

import click

from finsight.client import FinanceClient
from finsight.config import load_config
from finsight.forex import ApiRateSource


def parse_date(value: str | None, field_name: str) -> dt.date | None:
    """Parse an ISO date string into a date."""
    if value is None:
        return None
    try:
        return dt.date.fromisoformat(value)
    except ValueError as exc:
        raise click.BadParameter("Use YYYY-MM-DD format.", param_hint=field_name) from exc


def parse_amount(value: str, field_name: str) -> float:
    """Parse a numeric string into a float."""
    try:
        return float(value)
    except ValueError as exc:
        raise click.BadParameter("Use a valid numeric value.", param_hint=field_name) from exc


def parse_currency(value: str | None, field_name: str) -> str | None:
    """Normalize a currency code option."""
    if value is None:
        return None
    code = value.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise click.BadParameter("Use a 3-letter currency code.", param_hint=field_name)
    return code


def get_client(ctx: click.Context) -> FinanceClient:
    """Build a finsight client from Click context.

    With --live-rates, rates come from the HTTP rate API instead of the
    rates stored in the database.
    """
    payload = ctx.obj or {}
    db_path = payload.get("db_path")
    if db_path is None:
        raise click.UsageError("Provide --db with the path to the finsight database.")
    config = load_config(payload.get("config_path"))
    rate_source = None
    if payload.get("live_rates"):
        rate_source = ApiRateSource(
            base_url=config.rate_api_url,
            timeout_seconds=config.timeout_seconds,
        )
    return FinanceClient(db_path=db_path, config=config, rate_source=rate_source)
