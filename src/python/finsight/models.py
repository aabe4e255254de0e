"""Domain models and derived view records."""

from __future__ import annotations

from dataclasses import dataclass, field
import datetime as dt
import re
from typing import TYPE_CHECKING

from finsight.exceptions import ErrorKind
from finsight.schema import PERIOD_MONTHLY, PERIOD_TYPES

if TYPE_CHECKING:
    from finsight.conversion import ConversionContext

CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")


def _ensure_currency_code(value: str, field_name: str) -> str:
    """Validate and normalize an ISO 4217 style code."""
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a currency code")
    normalized = value.strip().upper()
    if not CURRENCY_PATTERN.match(normalized):
        raise ValueError(f"{field_name} must be a 3-letter currency code")
    return normalized


def _ensure_non_empty(value: str, field_name: str) -> str:
    """Validate required text fields."""
    if not value or not value.strip():
        raise ValueError(f"{field_name} is required")
    return value.strip()


@dataclass(frozen=True)
class Currency:
    """Currency metadata record.

    Attributes:
        code: ISO 4217 style identifier
        name: Display name
        symbol: Display symbol, may be empty
        decimal_digits: Digits used for rounding and display
        is_active: Whether the currency is offered to users
    """
    code: str
    name: str
    symbol: str | None = None
    decimal_digits: int = 2
    is_active: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", _ensure_currency_code(self.code, "code"))
        if self.decimal_digits is None or int(self.decimal_digits) < 0:
            raise ValueError("decimal_digits must be zero or greater")
        object.__setattr__(self, "decimal_digits", int(self.decimal_digits))
        object.__setattr__(self, "is_active", bool(self.is_active))


@dataclass(frozen=True)
class Money:
    """A native amount paired with its frozen reporting currency equivalent.

    ``reporting_amount`` is written once by the external write path using the
    rate in effect on the record's date. The engine only reads it.
    """
    native_amount: float
    native_currency: str
    reporting_amount: float

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "native_currency",
            _ensure_currency_code(self.native_currency, "native_currency"),
        )
        object.__setattr__(self, "native_amount", float(self.native_amount))
        object.__setattr__(self, "reporting_amount", float(self.reporting_amount))


@dataclass(frozen=True)
class Income:
    """Income record from storage."""
    key: int
    source_name: str
    date: dt.date | str
    amount: Money

    @property
    def reporting_currency_amount(self) -> float:
        return self.amount.reporting_amount


@dataclass(frozen=True)
class Expense:
    """Expense record from storage."""
    key: int
    category: str
    date: dt.date | str
    amount: Money
    description: str | None = None

    @property
    def reporting_currency_amount(self) -> float:
        return self.amount.reporting_amount


@dataclass(frozen=True)
class Account:
    """Account record with its current balance."""
    key: int
    name: str
    balance: Money
    account_type: str | None = None

    @property
    def reporting_currency_amount(self) -> float:
        return self.balance.reporting_amount


@dataclass(frozen=True)
class Investment:
    """Investment position; the current value may be unknown."""
    key: int
    name: str
    currency_code: str
    total_current_value: Money | None = None
    investment_type: str | None = None

    @property
    def total_current_value_reporting_currency(self) -> float | None:
        if self.total_current_value is None:
            return None
        return self.total_current_value.reporting_amount


@dataclass(frozen=True)
class Debt:
    """Debt record; paid debts are excluded from outstanding totals."""
    key: int
    creditor: str
    current_balance: Money
    is_paid: bool = False
    due_date: dt.date | str | None = None

    @property
    def current_balance_reporting_currency(self) -> float:
        return self.current_balance.reporting_amount


@dataclass(frozen=True)
class Budget:
    """Monthly spending limit for one category.

    ``period_start_date`` is kept as stored text so a malformed value can
    reach the calculator and degrade only that budget.
    """
    key: int
    category: str
    period_start_date: str
    limit: Money
    period_type: str = PERIOD_MONTHLY

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", _ensure_non_empty(self.category, "Category"))
        if self.period_type not in PERIOD_TYPES:
            raise ValueError(f"Unsupported budget period type: {self.period_type}")

    @property
    def currency_code(self) -> str:
        return self.limit.native_currency

    @property
    def amount_limit_native(self) -> float:
        return self.limit.native_amount

    @property
    def amount_limit_reporting_currency(self) -> float:
        return self.limit.reporting_amount


@dataclass(frozen=True)
class FinancialGoal:
    """Savings goal with target and saved amounts."""
    key: int
    name: str
    target: Money
    saved: Money
    target_date: dt.date | str | None = None


@dataclass(frozen=True)
class Profile:
    """User profile subset used for display preferences."""
    user_id: str
    preferred_currency: str | None = None
    full_name: str | None = None


@dataclass(frozen=True)
class BudgetActual:
    """Budget joined with its spending for the period.

    Attributes:
        budget: Source budget record
        actual_spending: Sum of matching expenses in the reporting currency
        remaining: Limit minus spending, negative when overspent
        progress: Percent of the limit used, clamped to [0, 100]
        error: MALFORMED_RECORD when the budget period could not be parsed
    """
    budget: Budget
    actual_spending: float
    remaining: float
    progress: float
    error: ErrorKind | None = None

    @property
    def malformed(self) -> bool:
        return self.error is ErrorKind.MALFORMED_RECORD


@dataclass(frozen=True)
class BudgetSummary:
    """Totals across a month of budget actuals."""
    total_limit: float
    total_spent: float
    income_considered: float
    remaining_from_income: float
    percent_of_income_spent: float


@dataclass(frozen=True)
class DashboardTotals:
    """Top level figures in the base reporting currency."""
    total_income: float
    total_spending: float
    net_savings: float
    total_account_balance: float
    total_investment_value: float
    total_outstanding_debt: float
    net_worth: float


@dataclass(frozen=True)
class CategoryShare:
    """One slice of a distribution."""
    key: str
    total: float
    share: float


@dataclass(frozen=True)
class GoalProgress:
    """Progress of a savings goal in the reporting currency."""
    goal: FinancialGoal
    progress: float
    remaining: float


@dataclass(frozen=True)
class Conversion:
    """Result of a display conversion.

    ``value`` is None and ``ok`` is False when the fallback was used.
    """
    value: float | None
    formatted: str
    ok: bool = True


@dataclass
class Dashboard:
    """Request scoped dashboard view model."""
    totals: DashboardTotals
    budget_actuals: list[BudgetActual]
    spending_distribution: list[CategoryShare]
    income_distribution: list[CategoryShare]
    goal_progress: list[GoalProgress]
    context: ConversionContext
    warnings: list[str] = field(default_factory=list)
