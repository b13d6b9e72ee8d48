"""Draft validation package."""

from expense_ledger.validation.validator import (
    ExpenseValidator,
    parse_amount,
    parse_category,
    parse_date,
)

__all__ = [
    "ExpenseValidator",
    "parse_amount",
    "parse_category",
    "parse_date",
]
