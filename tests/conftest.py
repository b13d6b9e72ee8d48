"""Shared fixtures for the expense ledger tests."""

import pytest

from expense_ledger.audit import AuditLogger
from expense_ledger.config import get_settings
from expense_ledger.ledger import Ledger
from expense_ledger.models.expense import ExpenseDraft
from expense_ledger.session import ExpenseFormSession


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate every test from LEDGER_* variables and cached settings."""
    for var in (
        "LEDGER_CATEGORIES",
        "LEDGER_LOG_LEVEL",
        "LEDGER_LOG_JSON",
        "LEDGER_AUDIT_HISTORY_SIZE",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def ledger(audit_logger):
    return Ledger(audit_logger=audit_logger)


@pytest.fixture
def session(ledger):
    return ExpenseFormSession(ledger)


@pytest.fixture
def make_draft():
    """Build a valid draft, overriding any field."""
    def _make(
        name="Lunch",
        amount="20",
        category="Food",
        date="2025-01-19",
    ) -> ExpenseDraft:
        return ExpenseDraft(name=name, amount=amount, category=category, date=date)
    return _make
