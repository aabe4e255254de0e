"""Database schema and engine constants."""

from __future__ import annotations

BASE_REPORTING_CURRENCY = "USD"
DEFAULT_DISPLAY_CURRENCY = "USD"
DEFAULT_LOCALE = "en_US"
DEFAULT_FALLBACK_DISPLAY = "N/A"

PERIOD_MONTHLY = "monthly"
PERIOD_TYPES = {PERIOD_MONTHLY}

TABLE_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS currencies (
        code TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        symbol TEXT,
        decimal_digits INTEGER NOT NULL DEFAULT 2,
        is_active INTEGER NOT NULL DEFAULT 1
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS exchange_rates (
        rate_date TEXT NOT NULL,
        base_currency_code TEXT NOT NULL,
        target_currency_code TEXT NOT NULL,
        rate REAL NOT NULL,
        PRIMARY KEY (rate_date, base_currency_code, target_currency_code)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS profiles (
        user_id TEXT PRIMARY KEY,
        full_name TEXT,
        preferred_currency TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS income (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        source_name TEXT NOT NULL,
        start_date TEXT NOT NULL,
        amount_native REAL NOT NULL,
        currency_code TEXT NOT NULL,
        amount_reporting_currency REAL NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS expenses (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        category TEXT NOT NULL,
        date TEXT NOT NULL,
        description TEXT,
        amount_native REAL NOT NULL,
        currency_code TEXT NOT NULL,
        amount_reporting_currency REAL NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS accounts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        type TEXT,
        balance_native REAL NOT NULL,
        native_currency_code TEXT NOT NULL,
        balance_reporting_currency REAL NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS investments (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        type TEXT,
        currency_code TEXT NOT NULL,
        total_current_value_native REAL,
        total_current_value_reporting_currency REAL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS debts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        creditor TEXT NOT NULL,
        currency_code TEXT NOT NULL,
        current_balance_native REAL NOT NULL,
        current_balance_reporting_currency REAL NOT NULL,
        due_date TEXT,
        is_paid INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS budgets (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        category TEXT NOT NULL,
        currency_code TEXT NOT NULL,
        amount_limit_native REAL NOT NULL,
        amount_limit_reporting_currency REAL NOT NULL,
        period_type TEXT NOT NULL DEFAULT 'monthly',
        period_start_date TEXT NOT NULL,
        UNIQUE (user_id, category, period_start_date)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS goals (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        currency_code TEXT NOT NULL,
        target_amount_native REAL NOT NULL,
        target_amount_reporting_currency REAL NOT NULL,
        current_amount_saved_native REAL NOT NULL DEFAULT 0,
        current_amount_saved_reporting_currency REAL NOT NULL DEFAULT 0,
        target_date TEXT
    )
    """,
]
