"""Public finsight package exports."""

from __future__ import annotations

from finsight.__version__ import __version__
from finsight.aggregates import compute_totals, goal_progress, spending_by_category
from finsight.budgets import compute_actuals, summarize_budgets
from finsight.client import FinanceClient
from finsight.config import FinsightConfig, load_config
from finsight.conversion import ConversionContext, convert_amount, format_money
from finsight.exceptions import (
    ErrorKind,
    FinsightError,
    NotFoundError,
    ReferenceDataError,
    TransportError,
)
from finsight.forex import ApiRateSource, RateBatchResolver, RateResolver
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
)
from finsight.persistence import PersistenceBackend, RateSource
from finsight.registry import CurrencyRegistry
from finsight.repository import Repository

__all__ = [
    "__version__",
    "FinanceClient",
    "FinsightConfig",
    "load_config",
    "ConversionContext",
    "convert_amount",
    "format_money",
    "compute_actuals",
    "summarize_budgets",
    "compute_totals",
    "goal_progress",
    "spending_by_category",
    "ErrorKind",
    "FinsightError",
    "NotFoundError",
    "ReferenceDataError",
    "TransportError",
    "ApiRateSource",
    "RateBatchResolver",
    "RateResolver",
    "Account",
    "Budget",
    "Currency",
    "Debt",
    "Expense",
    "FinancialGoal",
    "Income",
    "Investment",
    "Money",
    "PersistenceBackend",
    "RateSource",
    "CurrencyRegistry",
    "Repository",
]
