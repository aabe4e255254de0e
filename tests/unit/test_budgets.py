from __future__ import annotations

import datetime as dt

import pytest

from finsight.budgets import (
    compute_actuals,
    current_month_start,
    month_bounds,
    progress_percent,
    summarize_budgets,
)
from finsight.exceptions import ErrorKind
from finsight.models import Budget, Expense, Money


def _budget(category: str, limit: float, start: str = "2026-02-01", key: int = 1) -> Budget:
    return Budget(
        key=key,
        category=category,
        period_start_date=start,
        limit=Money(native_amount=limit, native_currency="USD", reporting_amount=limit),
    )


def _expense(category: str, date: dt.date | str, amount: float, key: int = 1) -> Expense:
    return Expense(
        key=key,
        category=category,
        date=date,
        amount=Money(native_amount=amount, native_currency="USD", reporting_amount=amount),
    )


def test_month_bounds_handles_leap_february() -> None:
    assert month_bounds(dt.date(2024, 2, 10)) == (dt.date(2024, 2, 1), dt.date(2024, 2, 29))
    assert current_month_start(dt.date(2026, 10, 15)) == dt.date(2026, 10, 1)


def test_overspend_clamps_progress_but_not_remaining() -> None:
    [actual] = compute_actuals(
        [_budget("dining", 500)],
        [_expense("dining", dt.date(2026, 2, 10), 750)],
    )

    assert actual.actual_spending == 750
    assert actual.remaining == -250
    assert actual.progress == 100


@pytest.mark.parametrize(
    ("spent", "limit", "expected"),
    [(0, 0, 0), (50, 0, 100), (25, 100, 25), (0, 100, 0), (-10, 100, 0)],
)
def test_progress_percent_edges(spent, limit, expected) -> None:
    assert progress_percent(spent, limit) == expected


def test_category_match_is_case_insensitive() -> None:
    [actual] = compute_actuals(
        [_budget("Food_And_Drink", 200)],
        [
            _expense("food_and_drink", dt.date(2026, 2, 3), 40, key=1),
            _expense("FOOD_AND_DRINK", dt.date(2026, 2, 4), 10, key=2),
            _expense("housing", dt.date(2026, 2, 4), 900, key=3),
        ],
    )

    assert actual.actual_spending == 50
    assert actual.progress == 25


def test_period_boundaries_are_inclusive() -> None:
    expenses = [
        _expense("fun", dt.date(2026, 1, 31), 1, key=1),
        _expense("fun", dt.date(2026, 2, 1), 10, key=2),
        _expense("fun", dt.date(2026, 2, 28), 20, key=3),
        _expense("fun", dt.date(2026, 3, 1), 100, key=4),
    ]

    [actual] = compute_actuals([_budget("fun", 100)], expenses)

    assert actual.actual_spending == 30


def test_string_expense_dates_are_parsed_and_bad_ones_skipped() -> None:
    expenses = [
        _expense("fun", "2026-02-14", 15, key=1),
        _expense("fun", "not-a-date", 99, key=2),
    ]

    [actual] = compute_actuals([_budget("fun", 60)], expenses)

    assert actual.actual_spending == 15


def test_malformed_budget_degrades_without_aborting_batch() -> None:
    budgets = [_budget("fun", 80, start="2026-13-01", key=1), _budget("fun", 100, key=2)]
    expenses = [_expense("fun", dt.date(2026, 2, 2), 40)]

    broken, healthy = compute_actuals(budgets, expenses)

    assert broken.malformed
    assert broken.error is ErrorKind.MALFORMED_RECORD
    assert broken.actual_spending == 0
    assert broken.remaining == 80
    assert broken.progress == 0
    assert healthy.actual_spending == 40


def test_budget_without_matching_expenses() -> None:
    [actual] = compute_actuals([_budget("travel", 300)], [])

    assert actual.actual_spending == 0
    assert actual.remaining == 300
    assert actual.progress == 0


def test_summary_uses_income_when_available() -> None:
    actuals = compute_actuals(
        [_budget("fun", 100, key=1), _budget("rent", 900, key=2)],
        [_expense("fun", dt.date(2026, 2, 1), 50, key=1), _expense("rent", dt.date(2026, 2, 1), 950, key=2)],
    )

    summary = summarize_budgets(actuals, month_income=2000)

    assert summary.total_limit == 1000
    assert summary.total_spent == 1000
    assert summary.income_considered == 2000
    assert summary.remaining_from_income == 1000
    assert summary.percent_of_income_spent == 50


def test_summary_falls_back_to_limits_without_income() -> None:
    actuals = compute_actuals([_budget("fun", 200)], [_expense("fun", dt.date(2026, 2, 1), 300)])

    summary = summarize_budgets(actuals)

    assert summary.income_considered == 200
    assert summary.remaining_from_income == -100
    assert summary.percent_of_income_spent == 150
