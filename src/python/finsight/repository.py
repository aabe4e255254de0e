"""SQLite repository implementation for finsight."""

from __future__ import annotations

from pathlib import Path
import datetime as dt
import logging
import math
import sqlite3
import threading
from typing import Any, Callable, TypeVar

from finsight.exceptions import NotFoundError, TransportError
from finsight.models import (
    Account,
    Budget,
    Currency,
    Debt,
    Expense,
    FinancialGoal,
    Income,
    Investment,
    Money,
    Profile,
)
from finsight.persistence import DateRange, PersistenceBackend
from finsight.schema import BASE_REPORTING_CURRENCY, TABLE_STATEMENTS

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Repository(PersistenceBackend):
    """SQLite-backed read implementation.

    Only rates from the base currency are stored. Inverse and cross rates
    are derived from them on lookup.
    """

    def __init__(
        self,
        db_path: str | Path,
        base_currency: str = BASE_REPORTING_CURRENCY,
    ) -> None:
        """Create a repository for the given database path."""
        self.db_path = Path(db_path)
        self.base_currency = base_currency
        self.connection: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def connect(self) -> None:
        """Open the database connection."""
        if self.connection is None:
            # Fan-out reads run on worker threads; access is serialized by _lock.
            self.connection = sqlite3.connect(self.db_path, check_same_thread=False)
            self.connection.row_factory = sqlite3.Row

    def close(self) -> None:
        """Close the database connection."""
        if self.connection is not None:
            self.connection.close()
            self.connection = None

    def create_schema(self) -> None:
        """Create all tables when missing."""
        self._ensure_connection()
        with self._lock:
            for statement in TABLE_STATEMENTS:
                self.connection.execute(statement)
            self.connection.commit()

    def list_currencies(self, active_only: bool = True) -> list[Currency]:
        """Return currencies ordered by name."""
        query = "SELECT code, name, symbol, decimal_digits, is_active FROM currencies"
        if active_only:
            query += " WHERE is_active = 1"
        query += " ORDER BY name"
        return self._build_all("currencies", self._fetch_all(query), _currency_from_row)

    def lookup_rate(
        self,
        date: dt.date,
        source_code: str,
        target_code: str,
    ) -> float | None:
        """Return the rate from source to target in effect on date."""
        if source_code == target_code:
            return 1.0
        if source_code == self.base_currency:
            return self._stored_rate(date, target_code)
        source_rate = self._stored_rate(date, source_code)
        if not source_rate:
            return None
        if target_code == self.base_currency:
            return 1.0 / source_rate
        target_rate = self._stored_rate(date, target_code)
        if target_rate is None:
            return None
        return target_rate / source_rate

    def get_profile(self, user_id: str) -> Profile:
        """Return the profile for user_id."""
        rows = self._fetch_all(
            "SELECT user_id, full_name, preferred_currency FROM profiles WHERE user_id = ?",
            (user_id,),
        )
        if not rows:
            raise NotFoundError(f"Profile {user_id} not found", {"user_id": user_id})
        row = rows[0]
        return Profile(
            user_id=row["user_id"],
            preferred_currency=row["preferred_currency"],
            full_name=row["full_name"],
        )

    def list_income(self, user_id: str, date_range: DateRange | None = None) -> list[Income]:
        """List income, optionally filtered by start date range."""
        where, params = self._user_filter(user_id, "start_date", date_range)
        rows = self._fetch_all(
            f"""
            SELECT id, source_name, start_date, amount_native, currency_code,
                   amount_reporting_currency
            FROM income
            {where}
            ORDER BY start_date DESC, id DESC
            """,
            params,
        )
        return self._build_all("income", rows, _income_from_row)

    def list_expenses(self, user_id: str, date_range: DateRange | None = None) -> list[Expense]:
        """List expenses, optionally filtered by date range."""
        where, params = self._user_filter(user_id, "date", date_range)
        rows = self._fetch_all(
            f"""
            SELECT id, category, date, description, amount_native, currency_code,
                   amount_reporting_currency
            FROM expenses
            {where}
            ORDER BY date DESC, id DESC
            """,
            params,
        )
        return self._build_all("expenses", rows, _expense_from_row)

    def list_accounts(self, user_id: str) -> list[Account]:
        """Return accounts ordered by name."""
        rows = self._fetch_all(
            """
            SELECT id, name, type, balance_native, native_currency_code,
                   balance_reporting_currency
            FROM accounts
            WHERE user_id = ?
            ORDER BY name
            """,
            (user_id,),
        )
        return self._build_all("accounts", rows, _account_from_row)

    def list_investments(self, user_id: str) -> list[Investment]:
        """Return investments ordered by name."""
        rows = self._fetch_all(
            """
            SELECT id, name, type, currency_code, total_current_value_native,
                   total_current_value_reporting_currency
            FROM investments
            WHERE user_id = ?
            ORDER BY name
            """,
            (user_id,),
        )
        return self._build_all("investments", rows, _investment_from_row)

    def list_debts(self, user_id: str) -> list[Debt]:
        """Return debts ordered by due date."""
        rows = self._fetch_all(
            """
            SELECT id, creditor, currency_code, current_balance_native,
                   current_balance_reporting_currency, due_date, is_paid
            FROM debts
            WHERE user_id = ?
            ORDER BY due_date, id
            """,
            (user_id,),
        )
        return self._build_all("debts", rows, _debt_from_row)

    def list_budgets(
        self,
        user_id: str,
        period_start_date: dt.date | None = None,
    ) -> list[Budget]:
        """Return budgets ordered by category."""
        query = """
            SELECT id, category, currency_code, amount_limit_native,
                   amount_limit_reporting_currency, period_type, period_start_date
            FROM budgets
            WHERE user_id = ?
        """
        params: list[object] = [user_id]
        if period_start_date is not None:
            query += " AND period_start_date = ?"
            params.append(period_start_date.isoformat())
        query += " ORDER BY category"
        return self._build_all("budgets", self._fetch_all(query, params), _budget_from_row)

    def list_goals(self, user_id: str) -> list[FinancialGoal]:
        """Return goals ordered by name."""
        rows = self._fetch_all(
            """
            SELECT id, name, currency_code, target_amount_native,
                   target_amount_reporting_currency, current_amount_saved_native,
                   current_amount_saved_reporting_currency, target_date
            FROM goals
            WHERE user_id = ?
            ORDER BY name
            """,
            (user_id,),
        )
        return self._build_all("goals", rows, _goal_from_row)

    @staticmethod
    def _build_all(
        table: str,
        rows: list[sqlite3.Row],
        build: Callable[[sqlite3.Row], T],
    ) -> list[T]:
        """Build one record per row, skipping rows that fail validation."""
        records = []
        for row in rows:
            try:
                records.append(build(row))
            except (TypeError, ValueError) as exc:
                logger.warning("Skipping malformed %s row %s: %s", table, row[0], exc)
        return records

    def _stored_rate(self, date: dt.date, target_code: str) -> float | None:
        """Return the latest stored base to target rate on or before date."""
        rows = self._fetch_all(
            """
            SELECT rate FROM exchange_rates
            WHERE base_currency_code = ?
              AND target_currency_code = ?
              AND rate_date <= ?
            ORDER BY rate_date DESC
            LIMIT 1
            """,
            (self.base_currency, target_code, date.isoformat()),
        )
        if not rows:
            return None
        try:
            return float(rows[0]["rate"])
        except (TypeError, ValueError):
            logger.warning("Unparsable stored rate %r for %s", rows[0]["rate"], target_code)
            return math.nan

    @staticmethod
    def _user_filter(
        user_id: str,
        date_column: str,
        date_range: DateRange | None,
    ) -> tuple[str, list[object]]:
        filters = ["user_id = ?"]
        params: list[object] = [user_id]
        if date_range is not None:
            start_date, end_date = date_range
            filters.append(f"{date_column} >= ?")
            params.append(start_date.isoformat())
            filters.append(f"{date_column} <= ?")
            params.append(end_date.isoformat())
        return "WHERE " + " AND ".join(filters), params

    def _fetch_all(self, query: str, params: Any = ()) -> list[sqlite3.Row]:
        self._ensure_connection()
        try:
            with self._lock:
                return self.connection.execute(query, params).fetchall()
        except sqlite3.Error as exc:
            logger.error("Query failed against %s: %s", self.db_path, exc)
            raise TransportError("Store query failed", {"error": str(exc)}) from exc

    def _ensure_connection(self) -> None:
        """Ensure the connection is initialized before use."""
        if self.connection is None:
            raise RuntimeError("Repository connection is not initialized")


def _parse_date(value: str) -> dt.date | str:
    """Parse stored ISO text, keeping the raw text when unparsable."""
    try:
        return dt.date.fromisoformat(value)
    except (TypeError, ValueError):
        return value


def _money(row: sqlite3.Row, native: str, currency: str, reporting: str) -> Money:
    return Money(
        native_amount=row[native],
        native_currency=row[currency],
        reporting_amount=row[reporting],
    )


def _currency_from_row(row: sqlite3.Row) -> Currency:
    return Currency(
        code=row["code"],
        name=row["name"],
        symbol=row["symbol"],
        decimal_digits=row["decimal_digits"],
        is_active=bool(row["is_active"]),
    )


def _income_from_row(row: sqlite3.Row) -> Income:
    return Income(
        key=row["id"],
        source_name=row["source_name"],
        date=_parse_date(row["start_date"]),
        amount=_money(row, "amount_native", "currency_code", "amount_reporting_currency"),
    )


def _expense_from_row(row: sqlite3.Row) -> Expense:
    return Expense(
        key=row["id"],
        category=row["category"],
        date=_parse_date(row["date"]),
        description=row["description"],
        amount=_money(row, "amount_native", "currency_code", "amount_reporting_currency"),
    )


def _account_from_row(row: sqlite3.Row) -> Account:
    return Account(
        key=row["id"],
        name=row["name"],
        account_type=row["type"],
        balance=_money(
            row, "balance_native", "native_currency_code", "balance_reporting_currency"
        ),
    )


def _investment_from_row(row: sqlite3.Row) -> Investment:
    value = None
    if row["total_current_value_reporting_currency"] is not None:
        value = Money(
            native_amount=row["total_current_value_native"] or 0.0,
            native_currency=row["currency_code"],
            reporting_amount=row["total_current_value_reporting_currency"],
        )
    return Investment(
        key=row["id"],
        name=row["name"],
        currency_code=row["currency_code"],
        investment_type=row["type"],
        total_current_value=value,
    )


def _debt_from_row(row: sqlite3.Row) -> Debt:
    return Debt(
        key=row["id"],
        creditor=row["creditor"],
        is_paid=bool(row["is_paid"]),
        due_date=_parse_date(row["due_date"]) if row["due_date"] else None,
        current_balance=_money(
            row,
            "current_balance_native",
            "currency_code",
            "current_balance_reporting_currency",
        ),
    )


def _budget_from_row(row: sqlite3.Row) -> Budget:
    return Budget(
        key=row["id"],
        category=row["category"],
        period_type=row["period_type"],
        period_start_date=row["period_start_date"],
        limit=_money(
            row,
            "amount_limit_native",
            "currency_code",
            "amount_limit_reporting_currency",
        ),
    )


def _goal_from_row(row: sqlite3.Row) -> FinancialGoal:
    return FinancialGoal(
        key=row["id"],
        name=row["name"],
        target_date=_parse_date(row["target_date"]) if row["target_date"] else None,
        target=_money(
            row,
            "target_amount_native",
            "currency_code",
            "target_amount_reporting_currency",
        ),
        saved=_money(
            row,
            "current_amount_saved_native",
            "currency_code",
            "current_amount_saved_reporting_currency",
        ),
    )
