"""Integration tests for finsight CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from finsight.cli.main import main


@pytest.fixture
def cli_runner(monkeypatch: pytest.MonkeyPatch):
    """Create a Click CLI test runner with default configuration."""
    monkeypatch.delenv("FINSIGHT_CONFIG", raising=False)
    return CliRunner()


@pytest.mark.sit
class TestCLI:
    """Test CLI commands against the seeded database."""

    def test_currency_list(self, cli_runner, test_db_path):
        result = cli_runner.invoke(main, ["--db", str(test_db_path), "currency", "list"])

        assert result.exit_code == 0
        assert "EUR" in result.output
        assert "GBP" not in result.output

    def test_currency_list_all(self, cli_runner, test_db_path):
        result = cli_runner.invoke(
            main, ["--db", str(test_db_path), "currency", "list", "--all"]
        )

        assert result.exit_code == 0
        assert "GBP" in result.output

    def test_currency_convert(self, cli_runner, test_db_path):
        result = cli_runner.invoke(
            main,
            ["--db", str(test_db_path), "currency", "convert", "90", "eur", "USD", "--date", "2026-02-15"],
        )

        assert result.exit_code == 0
        assert result.output.strip() == "$100.00"

    def test_currency_convert_without_rate(self, cli_runner, test_db_path):
        result = cli_runner.invoke(
            main,
            ["--db", str(test_db_path), "currency", "convert", "90", "EUR", "USD", "--date", "2025-01-01"],
        )

        assert result.exit_code == 0
        assert result.output.strip() == "N/A"

    def test_currency_convert_rejects_bad_date(self, cli_runner, test_db_path):
        result = cli_runner.invoke(
            main,
            ["--db", str(test_db_path), "currency", "convert", "90", "EUR", "USD", "--date", "2026-13-01"],
        )

        assert result.exit_code == 2

    def test_budget_list(self, cli_runner, test_db_path):
        result = cli_runner.invoke(
            main,
            ["--db", str(test_db_path), "budget", "list", "--user", "u1", "--month", "2026-02-01", "--currency", "USD"],
        )

        assert result.exit_code == 0
        assert "Food_And_Drink" in result.output
        assert "Spent $1,300.00 of $4,000.00 (32.5%)" in result.output

    def test_budget_list_empty(self, cli_runner, test_db_path):
        result = cli_runner.invoke(
            main,
            ["--db", str(test_db_path), "budget", "list", "--user", "u2", "--month", "2026-02-01"],
        )

        assert result.exit_code == 0
        assert "No budgets found." in result.output

    def test_dashboard(self, cli_runner, test_db_path):
        result = cli_runner.invoke(
            main,
            [
                "--db", str(test_db_path),
                "dashboard", "--user", "u1",
                "--from", "2026-02-01", "--to", "2026-02-28",
                "--currency", "USD",
            ],
        )

        assert result.exit_code == 0
        assert "Dashboard (USD)" in result.output
        assert "$4,000.00" in result.output
        assert "$1,300.00" in result.output

    def test_missing_db_is_usage_error(self, cli_runner):
        result = cli_runner.invoke(main, ["currency", "list"])

        assert result.exit_code != 0

    def test_currency_convert_from_inactive_currency(self, cli_runner, test_db_path):
        result = cli_runner.invoke(
            main,
            ["--db", str(test_db_path), "currency", "convert", "75", "GBP", "USD", "--date", "2026-02-15"],
        )

        assert result.exit_code == 0
        assert result.output.strip() == "$100.00"

    def test_budget_list_store_failure_is_reported(self, cli_runner, tmp_path):
        result = cli_runner.invoke(
            main,
            ["--db", str(tmp_path / "blank.db"), "budget", "list", "--user", "u1", "--month", "2026-02-01"],
        )

        assert result.exit_code == 1
        assert "Store query failed" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_dashboard_store_failure_is_reported(self, cli_runner, tmp_path):
        result = cli_runner.invoke(
            main,
            ["--db", str(tmp_path / "blank.db"), "dashboard", "--user", "u1"],
        )

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
