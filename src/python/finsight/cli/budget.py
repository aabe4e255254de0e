"""Budget CLI commands."""

from __future__ import annotations

import datetime as dt

import click

from finsight.cli.common import get_client, parse_currency, parse_date
from finsight.exceptions import FinsightError


@click.group()
def budget() -> None:
    """Budget commands."""


@budget.command("list")
@click.option("--user", "user_id", required=True, help="User id.")
@click.option("--month", "month_value", default=None, help="Month start in YYYY-MM-01 (defaults to current month).")
@click.option("--currency", default=None, help="Display currency code.")
@click.pass_context
def list_budgets(
    ctx: click.Context,
    user_id: str,
    month_value: str | None,
    currency: str | None,
) -> None:
    """List budgets with spending, remaining amount and progress.

    Examples:
        finsight --db finance.db budget list --user u1
        finsight --db finance.db budget list --user u1 --month 2026-02-01 --currency EUR
    """
    month_start = parse_date(month_value, "--month") or dt.date.today()
    display_currency = parse_currency(currency, "--currency")
    with get_client(ctx) as client:
        try:
            actuals, summary = client.budget_view(user_id, month_start)
            context = client.build_context(
                client.list_currencies(active_only=False),
                dt.date.today(),
                display_currency=display_currency,
            )
        except FinsightError as e:
            raise click.ClickException(str(e))

    if not actuals:
        click.echo("No budgets found.")
        return

    click.echo(f"\nBudgets ({context.display_currency}):")
    click.echo("-" * 80)
    click.echo(f"{'Category':<24} {'Spent':>16} {'Limit':>16} {'Remaining':>16} {'%':>5}")
    click.echo("-" * 80)
    for actual in actuals:
        click.echo(
            f"{actual.budget.category:<24} "
            f"{context.display(actual.actual_spending):>16} "
            f"{context.display(actual.budget.amount_limit_reporting_currency):>16} "
            f"{context.display(actual.remaining):>16} "
            f"{actual.progress:>5.0f}"
        )
    click.echo("-" * 80)
    click.echo(
        f"Spent {context.display(summary.total_spent)} of "
        f"{context.display(summary.income_considered)} "
        f"({summary.percent_of_income_spent:.1f}%)"
    )
