"""Read capability interfaces for finsight storage backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
import datetime as dt

from finsight.models import (
    Account,
    Budget,
    Currency,
    Debt,
    Expense,
    FinancialGoal,
    Income,
    Investment,
    Profile,
)

DateRange = tuple[dt.date, dt.date]


class RateSource(ABC):
    """Abstract exchange rate lookup capability."""

    @abstractmethod
    def lookup_rate(
        self,
        date: dt.date,
        source_code: str,
        target_code: str,
    ) -> float | None:
        """Return units of target per one unit of source, or None if absent.

        Raises TransportError when the store cannot be queried.
        """


class PersistenceBackend(RateSource):
    """Abstract interface for repository backends."""

    @abstractmethod
    def connect(self) -> None:
        """Establish a backend connection."""

    @abstractmethod
    def close(self) -> None:
        """Close the backend connection."""

    @abstractmethod
    def list_currencies(self, active_only: bool = True) -> list[Currency]:
        """Return currency metadata ordered by name."""

    @abstractmethod
    def get_profile(self, user_id: str) -> Profile:
        """Return the profile for a user."""

    @abstractmethod
    def list_income(self, user_id: str, date_range: DateRange | None = None) -> list[Income]:
        """Return income records, optionally within a date range."""

    @abstractmethod
    def list_expenses(self, user_id: str, date_range: DateRange | None = None) -> list[Expense]:
        """Return expense records, optionally within a date range."""

    @abstractmethod
    def list_accounts(self, user_id: str) -> list[Account]:
        """Return accounts ordered by name."""

    @abstractmethod
    def list_investments(self, user_id: str) -> list[Investment]:
        """Return investment positions."""

    @abstractmethod
    def list_debts(self, user_id: str) -> list[Debt]:
        """Return debts, paid and unpaid."""

    @abstractmethod
    def list_budgets(
        self,
        user_id: str,
        period_start_date: dt.date | None = None,
    ) -> list[Budget]:
        """Return budgets ordered by category, optionally for one period."""

    @abstractmethod
    def list_goals(self, user_id: str) -> list[FinancialGoal]:
        """Return financial goals."""
