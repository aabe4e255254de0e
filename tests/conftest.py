"""Pytest configuration and fixtures.

Integration fixtures build a seeded SQLite database in the test's temporary
directory; unit fixtures provide an in-memory registry and rate map.
"""
from __future__ import annotations

from pathlib import Path
import sys

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src" / "python"
TESTS_DIR = Path(__file__).resolve().parent

for path in (SRC_DIR, TESTS_DIR.parent):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from finsight.conversion import ConversionContext  # noqa: E402
from finsight.models import Currency  # noqa: E402
from finsight.registry import CurrencyRegistry  # noqa: E402
from tests.utils.database import create_schema, seed_database  # noqa: E402


@pytest.fixture()
def test_db_path(tmp_path: Path) -> Path:
    """Seeded test database for SIT tests."""
    path = tmp_path / "finsight.db"
    seed_database(path)
    return path


@pytest.fixture()
def empty_db_path(tmp_path: Path) -> Path:
    """Test database with schema only."""
    path = tmp_path / "empty.db"
    create_schema(path)
    return path


@pytest.fixture()
def registry() -> CurrencyRegistry:
    return CurrencyRegistry(
        [
            Currency(code="USD", name="US Dollar", symbol="$", decimal_digits=2),
            Currency(code="EUR", name="Euro", symbol="€", decimal_digits=2),
            Currency(code="JPY", name="Japanese Yen", symbol="¥", decimal_digits=0),
            Currency(code="GBP", name="British Pound", symbol="£", decimal_digits=2, is_active=False),
        ]
    )


@pytest.fixture()
def rates() -> dict[str, float]:
    """Units of each currency per one USD."""
    return {"USD": 1.0, "EUR": 0.9, "JPY": 150.0}


@pytest.fixture()
def context(registry: CurrencyRegistry, rates: dict[str, float]) -> ConversionContext:
    return ConversionContext(
        registry=registry,
        rates=rates,
        base_currency="USD",
        display_currency="EUR",
    )
