"""
Expense Ledger - Source Package

An in-memory expense ledger behind a simple expense form: add, delete,
sort, filter and total line items, with per-field validation.

DESIGN PRINCIPLES:
1. One gate in: every record passes validation in Ledger.add
2. Bad input is a return value, never an exception
3. Money is Decimal, never float
4. Views never mutate storage
5. Every change is auditable
"""

from expense_ledger.exceptions import LedgerError, UnknownFieldError
from expense_ledger.formatting import format_amount, format_total_label
from expense_ledger.ledger import Ledger
from expense_ledger.models import (
    ExpenseCategory,
    ExpenseDraft,
    ExpenseRecord,
    Rejected,
    SortDirection,
    SortKey,
    ValidationResult,
)
from expense_ledger.session import ExpenseFormSession, create_session

__version__ = "1.0.0"

__all__ = [
    "ExpenseCategory",
    "ExpenseDraft",
    "ExpenseFormSession",
    "ExpenseRecord",
    "Ledger",
    "LedgerError",
    "Rejected",
    "SortDirection",
    "SortKey",
    "UnknownFieldError",
    "ValidationResult",
    "create_session",
    "format_amount",
    "format_total_label",
]
