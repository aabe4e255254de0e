"""Dashboard CLI command."""

from __future__ import annotations

import click

from finsight.cli.common import get_client, parse_currency, parse_date
from finsight.exceptions import FinsightError


@click.command("dashboard")
@click.option("--user", "user_id", required=True, help="User id.")
@click.option("--from", "from_value", default=None, help="Period start in YYYY-MM-DD.")
@click.option("--to", "to_value", default=None, help="Period end in YYYY-MM-DD.")
@click.option("--currency", default=None, help="Display currency (defaults to profile).")
@click.pass_context
def dashboard(
    ctx: click.Context,
    user_id: str,
    from_value: str | None,
    to_value: str | None,
    currency: str | None,
) -> None:
    """Show income, spending, savings and net worth for a period.

    Examples:
        finsight --db finance.db dashboard --user u1
        finsight --db finance.db dashboard --user u1 --from 2026-01-01 --to 2026-03-31 --currency EUR
    """
    start_date = parse_date(from_value, "--from")
    end_date = parse_date(to_value, "--to")
    display_currency = parse_currency(currency, "--currency")
    with get_client(ctx) as client:
        try:
            view = client.dashboard(
                user_id,
                start_date=start_date,
                end_date=end_date,
                display_currency=display_currency,
            )
        except FinsightError as e:
            raise click.ClickException(str(e))

    context = view.context
    totals = view.totals
    click.echo(f"\nDashboard ({context.display_currency})")
    click.echo("-" * 50)
    rows = [
        ("Total income", totals.total_income),
        ("Total spending", totals.total_spending),
        ("Net savings", totals.net_savings),
        ("Account balances", totals.total_account_balance),
        ("Investments", totals.total_investment_value),
        ("Outstanding debt", totals.total_outstanding_debt),
        ("Net worth", totals.net_worth),
    ]
    for label, amount in rows:
        click.echo(f"{label:<20} {context.display(amount):>28}")

    if view.budget_actuals:
        click.echo("\nBudgets this month:")
        for actual in view.budget_actuals:
            click.echo(
                f"{actual.budget.category:<24} "
                f"{context.display(actual.actual_spending):>16} of "
                f"{context.display(actual.budget.amount_limit_reporting_currency):>16} "
                f"({actual.progress:.0f}%)"
            )

    for warning in view.warnings:
        click.echo(f"Warning: {warning}", err=True)
