"""Budget actuals for monthly category budgets."""

from __future__ import annotations

import calendar
import datetime as dt
import logging
from typing import Iterable

from finsight.exceptions import ErrorKind
from finsight.models import Budget, BudgetActual, BudgetSummary, Expense

logger = logging.getLogger(__name__)


def month_bounds(day: dt.date) -> tuple[dt.date, dt.date]:
    """Return the first and last calendar day of day's month."""
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last_day)


def current_month_start(today: dt.date | None = None) -> dt.date:
    """Return the period key of the month containing today."""
    return month_bounds(today or dt.date.today())[0]


def parse_iso_date(value: dt.date | dt.datetime | str | None) -> dt.date | None:
    """Parse a date or ISO string, returning None when unparsable."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    try:
        return dt.date.fromisoformat(text[:10])
    except ValueError:
        return None


def progress_percent(amount: float, limit: float) -> float:
    """Return amount as a percentage of limit, clamped to [0, 100].

    A non-positive limit reads as 100 once anything is spent, else 0.
    """
    if limit > 0:
        progress = amount / limit * 100
    elif amount > 0:
        progress = 100.0
    else:
        progress = 0.0
    return min(100.0, max(0.0, progress))


def compute_actuals(
    budgets: Iterable[Budget],
    expenses: Iterable[Expense],
) -> list[BudgetActual]:
    """Join budgets with expenses by category and month."""
    dated_expenses = []
    for expense in expenses:
        expense_date = parse_iso_date(expense.date)
        if expense_date is None:
            logger.warning(
                "Invalid date for expense %s during budget calculation: %r",
                expense.key,
                expense.date,
            )
            continue
        dated_expenses.append((expense_date, expense))

    return [_compute_actual(budget, dated_expenses) for budget in budgets]


def _compute_actual(
    budget: Budget,
    dated_expenses: list[tuple[dt.date, Expense]],
) -> BudgetActual:
    limit = budget.amount_limit_reporting_currency
    period_start = parse_iso_date(budget.period_start_date)
    if period_start is None:
        logger.error(
            "Invalid period_start_date for budget %s: %r",
            budget.key,
            budget.period_start_date,
        )
        return BudgetActual(
            budget=budget,
            actual_spending=0.0,
            remaining=limit,
            progress=0.0,
            error=ErrorKind.MALFORMED_RECORD,
        )

    _, period_end = month_bounds(period_start)
    category = budget.category.lower()
    spent = sum(
        expense.reporting_currency_amount
        for expense_date, expense in dated_expenses
        if expense.category.lower() == category
        and period_start <= expense_date <= period_end
    )
    spent = float(spent)
    return BudgetActual(
        budget=budget,
        actual_spending=spent,
        remaining=limit - spent,
        progress=progress_percent(spent, limit),
    )


def summarize_budgets(
    actuals: Iterable[BudgetActual],
    month_income: float = 0.0,
) -> BudgetSummary:
    """Total a month of budget actuals against the month's income.

    When there is no income the budget limits stand in for it.
    """
    actuals = list(actuals)
    total_limit = float(sum(item.budget.amount_limit_reporting_currency for item in actuals))
    total_spent = float(sum(item.actual_spending for item in actuals))
    income_considered = month_income if month_income > 0 else total_limit
    percent_spent = total_spent / income_considered * 100 if income_considered > 0 else 0.0
    return BudgetSummary(
        total_limit=total_limit,
        total_spent=total_spent,
        income_considered=income_considered,
        remaining_from_income=income_considered - total_spent,
        percent_of_income_spent=percent_spent,
    )
