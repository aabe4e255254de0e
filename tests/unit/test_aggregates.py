from __future__ import annotations

import datetime as dt

import pytest

from finsight.aggregates import (
    compute_totals,
    goal_progress,
    income_by_source,
    spending_by_category,
    total_investment_value,
    total_outstanding_debt,
)
from finsight.models import (
    Account,
    Debt,
    Expense,
    FinancialGoal,
    Income,
    Investment,
    Money,
)


def _money(reporting: float, currency: str = "USD", native: float | None = None) -> Money:
    return Money(
        native_amount=reporting if native is None else native,
        native_currency=currency,
        reporting_amount=reporting,
    )


def test_net_worth_excludes_paid_debt() -> None:
    accounts = [
        Account(key=1, name="Checking", balance=_money(600)),
        Account(key=2, name="Euro Savings", balance=_money(400, "EUR", 360)),
    ]
    investments = [Investment(key=1, name="Fund", currency_code="USD", total_current_value=_money(500))]
    debts = [
        Debt(key=1, creditor="Card", current_balance=_money(150)),
        Debt(key=2, creditor="Store", current_balance=_money(50)),
        Debt(key=3, creditor="Loan", current_balance=_money(300), is_paid=True),
    ]

    totals = compute_totals([], [], accounts, investments, debts)

    assert totals.total_account_balance == 1000
    assert totals.total_investment_value == 500
    assert totals.total_outstanding_debt == 200
    assert totals.net_worth == 1300


def test_net_savings_is_income_minus_spending() -> None:
    incomes = [Income(key=1, source_name="Salary", date=dt.date(2026, 2, 1), amount=_money(3000))]
    expenses = [Expense(key=1, category="rent", date=dt.date(2026, 2, 1), amount=_money(1200))]

    totals = compute_totals(incomes, expenses, [], [], [])

    assert totals.total_income == 3000
    assert totals.total_spending == 1200
    assert totals.net_savings == 1800


def test_investment_without_value_counts_as_zero() -> None:
    investments = [
        Investment(key=1, name="Fund", currency_code="USD", total_current_value=_money(250)),
        Investment(key=2, name="Unpriced", currency_code="USD"),
    ]

    assert total_investment_value(investments) == 250


def test_empty_collections_sum_to_zero() -> None:
    totals = compute_totals([], [], [], [], [])

    assert totals.net_worth == 0
    assert total_outstanding_debt([]) == 0


def test_spending_distribution_groups_case_insensitively() -> None:
    expenses = [
        Expense(key=1, category="Food", date=dt.date(2026, 2, 1), amount=_money(30)),
        Expense(key=2, category="food", date=dt.date(2026, 2, 2), amount=_money(30)),
        Expense(key=3, category="rent", date=dt.date(2026, 2, 3), amount=_money(140)),
    ]

    shares = spending_by_category(expenses)

    assert [share.key for share in shares] == ["rent", "food"]
    assert shares[0].share == pytest.approx(0.7)
    assert shares[1].total == 60


def test_income_distribution_with_zero_total() -> None:
    incomes = [Income(key=1, source_name="Refund", date=dt.date(2026, 2, 1), amount=_money(0))]

    [share] = income_by_source(incomes)

    assert share.share == 0


def test_goal_progress_is_clamped() -> None:
    goal = FinancialGoal(key=1, name="Trip", target=_money(1000), saved=_money(1250))

    progress = goal_progress(goal)

    assert progress.progress == 100
    assert progress.remaining == -250
