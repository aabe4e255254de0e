"""Client orchestration layer for finsight."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable
import datetime as dt
import logging

from finsight.aggregates import (
    compute_totals,
    goal_progress,
    income_by_source,
    spending_by_category,
    total_income,
)
from finsight.budgets import compute_actuals, month_bounds, summarize_budgets
from finsight.config import FinsightConfig, configure_logging, load_config
from finsight.conversion import ConversionContext
from finsight.exceptions import ErrorKind, FinsightError, NotFoundError, ReferenceDataError
from finsight.forex import RateBatchResolver, RateResolver
from finsight.models import BudgetActual, BudgetSummary, Conversion, Currency, Dashboard
from finsight.persistence import PersistenceBackend, RateSource
from finsight.registry import CurrencyRegistry, normalize_code
from finsight.repository import Repository

configure_logging()
logger = logging.getLogger(__name__)


class FinanceClient:
    """Coordinate store reads and build request scoped view models."""

    def __init__(
        self,
        db_path: str | Path | None = None,
        repository: PersistenceBackend | None = None,
        config: FinsightConfig | None = None,
        rate_source: RateSource | None = None,
    ) -> None:
        """Initialize the client with a repository backend.

        Args:
            db_path: Path to the SQLite database
            repository: Optional custom persistence backend
            config: Engine settings; loaded from FINSIGHT_CONFIG when omitted
            rate_source: Optional rate lookup; defaults to the repository
        """
        if repository is None and db_path is None:
            raise ValueError("db_path is required when no repository is given")
        self.config = config or load_config()
        self.repository = repository or Repository(
            db_path, base_currency=self.config.base_currency
        )
        self.rate_source = rate_source or self.repository

    def __enter__(self) -> "FinanceClient":
        """Open the repository connection."""
        self.repository.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        """Close the repository connection."""
        self.close()

    def close(self) -> None:
        """Close the repository connection."""
        self.repository.close()

    def list_currencies(self, active_only: bool = True) -> list[Currency]:
        return self.repository.list_currencies(active_only=active_only)

    def build_context(
        self,
        currencies: list[Currency],
        rate_date: dt.date,
        display_currency: str | None = None,
    ) -> ConversionContext:
        """Resolve rates for currencies and bundle them into a context.

        Rates are resolved for every currency in the list plus the display
        currency. Raises ReferenceDataError when there is no currency metadata
        or no rate could be resolved at all.
        """
        if not currencies:
            raise ReferenceDataError("No currency metadata available")
        registry = CurrencyRegistry(currencies)
        display = normalize_code(display_currency or self.config.default_display_currency)
        targets = registry.codes()
        targets.append(display)

        batch = RateBatchResolver(
            RateResolver(self.rate_source),
            max_workers=self.config.rate_workers,
        ).resolve_many(rate_date, targets, self.config.base_currency)
        if batch.error is not None:
            raise ReferenceDataError(
                "No exchange rates could be resolved",
                {"date": rate_date.isoformat(), "error": str(batch.error)},
                kind=ErrorKind.TRANSPORT_FAILURE,
            )
        return ConversionContext.from_config(
            self.config,
            registry,
            batch.rates,
            display_currency=display,
            missing_rates=batch.missing,
        )

    def convert(
        self,
        amount: float,
        source_code: str,
        target_code: str,
        rate_date: dt.date | None = None,
    ) -> Conversion:
        """Convert a single amount using rates in effect on rate_date."""
        rate_date = rate_date or dt.date.today()
        currencies = self.repository.list_currencies(active_only=False)
        context = self.build_context(currencies, rate_date, display_currency=target_code)
        return context.convert(amount, source_code, target_code)

    def dashboard(
        self,
        user_id: str,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
        today: dt.date | None = None,
        display_currency: str | None = None,
    ) -> Dashboard:
        """Fetch everything a dashboard needs concurrently and aggregate it.

        The period defaults to the month containing today. Budgets and their
        expenses always cover the current month.
        """
        today = today or dt.date.today()
        month_start, month_end = month_bounds(today)
        period = (start_date or month_start, end_date or month_end)
        repo = self.repository

        reads: dict[str, Callable[[], Any]] = {
            "profile": lambda: repo.get_profile(user_id),
            "currencies": lambda: repo.list_currencies(active_only=True),
            "income": lambda: repo.list_income(user_id, period),
            "expenses": lambda: repo.list_expenses(user_id, period),
            "accounts": lambda: repo.list_accounts(user_id),
            "investments": lambda: repo.list_investments(user_id),
            "debts": lambda: repo.list_debts(user_id),
            "budgets": lambda: repo.list_budgets(user_id, month_start),
            "month_expenses": lambda: repo.list_expenses(user_id, (month_start, month_end)),
            "goals": lambda: repo.list_goals(user_id),
        }
        with ThreadPoolExecutor(max_workers=len(reads)) as executor:
            futures = {name: executor.submit(read) for name, read in reads.items()}
            results, warnings = self._join_reads(futures)

        if "currencies" not in results:
            raise ReferenceDataError("Failed to fetch currencies")

        profile = results.get("profile")
        preferred = display_currency
        if preferred is None and profile is not None:
            preferred = profile.preferred_currency
        context = self.build_context(results["currencies"], today, display_currency=preferred)

        expenses = results.get("expenses", [])
        incomes = results.get("income", [])
        totals = compute_totals(
            incomes,
            expenses,
            results.get("accounts", []),
            results.get("investments", []),
            results.get("debts", []),
        )
        return Dashboard(
            totals=totals,
            budget_actuals=compute_actuals(
                results.get("budgets", []), results.get("month_expenses", [])
            ),
            spending_distribution=spending_by_category(expenses),
            income_distribution=income_by_source(incomes),
            goal_progress=[goal_progress(goal) for goal in results.get("goals", [])],
            context=context,
            warnings=warnings,
        )

    def budget_view(
        self,
        user_id: str,
        month_start: dt.date | None = None,
    ) -> tuple[list[BudgetActual], BudgetSummary]:
        """Return budget actuals and their summary for one month."""
        first_day, last_day = month_bounds(month_start or dt.date.today())
        period = (first_day, last_day)
        repo = self.repository
        with ThreadPoolExecutor(max_workers=3) as executor:
            budgets = executor.submit(repo.list_budgets, user_id, first_day)
            expenses = executor.submit(repo.list_expenses, user_id, period)
            incomes = executor.submit(repo.list_income, user_id, period)
            actuals = compute_actuals(budgets.result(), expenses.result())
            month_income = total_income(incomes.result())
        return actuals, summarize_budgets(actuals, month_income)

    @staticmethod
    def _join_reads(futures: dict[str, Future]) -> tuple[dict[str, Any], list[str]]:
        """Collect read results, turning store failures into warnings."""
        results: dict[str, Any] = {}
        warnings: list[str] = []
        for name, future in futures.items():
            try:
                results[name] = future.result()
            except NotFoundError as exc:
                warnings.append(f"{name}: {exc}")
                logger.warning("Read %s found nothing: %s", name, exc)
            except FinsightError as exc:
                warnings.append(f"{name}: {exc}")
                logger.error("Read %s failed: %s", name, exc)
            except Exception as exc:
                warnings.append(f"{name}: {exc}")
                logger.exception("Read %s failed unexpectedly", name)
        return results, warnings
