"""Currency CLI commands."""

from __future__ import annotations

import datetime as dt

import click

from finsight.cli.common import get_client, parse_amount, parse_currency, parse_date
from finsight.exceptions import FinsightError


@click.group()
def currency() -> None:
    """Currency commands."""


@currency.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive currencies.")
@click.pass_context
def list_currencies(ctx: click.Context, include_inactive: bool) -> None:
    """List currencies with symbol and decimal digits."""
    with get_client(ctx) as client:
        try:
            currencies = client.list_currencies(active_only=not include_inactive)
        except FinsightError as e:
            raise click.ClickException(str(e))

    if not currencies:
        click.echo("No currencies found.")
        return

    click.echo(f"{'Code':<6} {'Name':<30} {'Symbol':<8} {'Digits':>6}")
    for item in currencies:
        click.echo(
            f"{item.code:<6} {item.name:<30} {item.symbol or '':<8} {item.decimal_digits:>6}"
        )


@currency.command("convert")
@click.argument("amount_value")
@click.argument("source")
@click.argument("target")
@click.option("--date", "date_value", default=None, help="Rate date in YYYY-MM-DD (defaults to today).")
@click.pass_context
def convert(
    ctx: click.Context,
    amount_value: str,
    source: str,
    target: str,
    date_value: str | None,
) -> None:
    """Convert AMOUNT from SOURCE to TARGET currency.

    Examples:
        finsight --db finance.db currency convert 100 EUR JPY
        finsight --db finance.db currency convert 100 EUR USD --date 2026-01-15
    """
    amount = parse_amount(amount_value, "AMOUNT")
    source_code = parse_currency(source, "SOURCE")
    target_code = parse_currency(target, "TARGET")
    rate_date = parse_date(date_value, "--date") or dt.date.today()
    with get_client(ctx) as client:
        try:
            result = client.convert(amount, source_code, target_code, rate_date)
        except FinsightError as e:
            raise click.ClickException(str(e))
    click.echo(result.formatted)
