"""
Data Models Package

This package contains all Pydantic models used by the expense ledger.
All data flowing through the ledger must conform to these schemas.
"""

from expense_ledger.models.expense import (
    DRAFT_FIELDS,
    MAX_AMOUNT,
    ExpenseCategory,
    ExpenseDraft,
    ExpenseRecord,
    Rejected,
    SortDirection,
    SortKey,
    ValidationIssue,
    ValidationResult,
    quantize_amount,
)
from expense_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "DRAFT_FIELDS",
    "MAX_AMOUNT",
    "ExpenseCategory",
    "ExpenseDraft",
    "ExpenseRecord",
    "Rejected",
    "SortDirection",
    "SortKey",
    "ValidationIssue",
    "ValidationResult",
    "quantize_amount",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
