"""Top level reductions over reporting currency fields.

Every input is already expressed in the base reporting currency, so these
are plain sums; no rate lookups or conversions happen here.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Callable, Iterable, TypeVar

from finsight.budgets import progress_percent
from finsight.models import (
    Account,
    CategoryShare,
    DashboardTotals,
    Debt,
    Expense,
    FinancialGoal,
    GoalProgress,
    Income,
    Investment,
)

T = TypeVar("T")


def total_income(incomes: Iterable[Income]) -> float:
    return float(sum(item.reporting_currency_amount for item in incomes))


def total_spending(expenses: Iterable[Expense]) -> float:
    return float(sum(item.reporting_currency_amount for item in expenses))


def total_account_balance(accounts: Iterable[Account]) -> float:
    return float(sum(item.reporting_currency_amount for item in accounts))


def total_investment_value(investments: Iterable[Investment]) -> float:
    """Sum current values; positions without a value count as zero."""
    return float(
        sum(item.total_current_value_reporting_currency or 0.0 for item in investments)
    )


def total_outstanding_debt(debts: Iterable[Debt]) -> float:
    """Sum balances of debts that are not paid."""
    return float(
        sum(item.current_balance_reporting_currency for item in debts if not item.is_paid)
    )


def compute_totals(
    incomes: Iterable[Income],
    expenses: Iterable[Expense],
    accounts: Iterable[Account],
    investments: Iterable[Investment],
    debts: Iterable[Debt],
) -> DashboardTotals:
    """Compute dashboard figures in the base reporting currency."""
    income = total_income(incomes)
    spending = total_spending(expenses)
    balances = total_account_balance(accounts)
    investment_value = total_investment_value(investments)
    debt = total_outstanding_debt(debts)
    return DashboardTotals(
        total_income=income,
        total_spending=spending,
        net_savings=income - spending,
        total_account_balance=balances,
        total_investment_value=investment_value,
        total_outstanding_debt=debt,
        net_worth=balances + investment_value - debt,
    )


def spending_by_category(expenses: Iterable[Expense]) -> list[CategoryShare]:
    """Group spending by lower-cased category."""
    return _distribution(expenses, lambda item: item.category.lower())


def income_by_source(incomes: Iterable[Income]) -> list[CategoryShare]:
    """Group income by source name."""
    return _distribution(incomes, lambda item: item.source_name)


def goal_progress(goal: FinancialGoal) -> GoalProgress:
    """Return clamped progress and unclamped remaining for a goal."""
    target = goal.target.reporting_amount
    saved = goal.saved.reporting_amount
    return GoalProgress(
        goal=goal,
        progress=progress_percent(saved, target),
        remaining=target - saved,
    )


def _distribution(items: Iterable[T], key: Callable[[T], str]) -> list[CategoryShare]:
    totals: dict[str, float] = defaultdict(float)
    for item in items:
        totals[key(item)] += item.reporting_currency_amount
    grand_total = sum(totals.values())
    ordered = sorted(totals.items(), key=lambda pair: (-pair[1], pair[0]))
    return [
        CategoryShare(
            key=name,
            total=amount,
            share=amount / grand_total if grand_total else 0.0,
        )
        for name, amount in ordered
    ]
