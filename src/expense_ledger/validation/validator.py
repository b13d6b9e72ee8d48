"""
Draft Validation

DESIGN DECISION: Every field of a draft is checked independently.
There is no short-circuit: a form needs all four flags at once so it can
mark every bad input in a single pass.

CHECKS:
- name: non-empty after stripping whitespace
- amount: a finite decimal number that is still > 0 once rounded to cents,
  and no larger than MAX_AMOUNT
- category: one of the categories this ledger accepts
- date: an ISO calendar date (YYYY-MM-DD)

IMPORTANT: Validation NEVER raises for bad input and NEVER silently
fixes it. It reports, and the caller decides.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from expense_ledger.config import get_settings
from expense_ledger.models.expense import (
    MAX_AMOUNT,
    ExpenseCategory,
    ExpenseDraft,
    ValidationIssue,
    ValidationResult,
    quantize_amount,
)


ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def parse_amount(raw: str) -> Optional[Decimal]:
    """
    Parse raw amount text into cents.

    Returns None when the text is not a finite number. The result may be
    zero or negative; range checks belong to the validator.
    """
    text = raw.strip()
    if not text:
        return None
    try:
        value = Decimal(text)
        if not value.is_finite():
            return None
        # quantize raises for values too large for the decimal context
        return quantize_amount(value)
    except InvalidOperation:
        return None


def parse_date(raw: str) -> Optional[date]:
    """Parse an ISO calendar date, or return None."""
    text = raw.strip()
    # fromisoformat also accepts compact and week forms on newer interpreters
    if not ISO_DATE.fullmatch(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def parse_category(
    raw: str,
    accepted: Iterable[ExpenseCategory],
) -> Optional[ExpenseCategory]:
    """Match raw text exactly against the accepted categories."""
    for category in accepted:
        if raw == category.value:
            return category
    return None


class ExpenseValidator:
    """
    Validates expense drafts field by field.

    The validator is stateless apart from the set of accepted categories,
    so one instance can serve a whole session.
    """

    def __init__(
        self,
        categories: Optional[Iterable[ExpenseCategory]] = None,
    ):
        """
        Initialize validator.

        Args:
            categories: Categories to accept. If None, the configured
                        categories (LEDGER_CATEGORIES) are used.
        """
        if categories is None:
            categories = get_settings().categories_list
        self._categories = tuple(dict.fromkeys(ExpenseCategory(c) for c in categories))
        if not self._categories:
            raise ValueError("A validator needs at least one accepted category")

    @property
    def categories(self) -> tuple[ExpenseCategory, ...]:
        return self._categories

    def _check_name(self, draft: ExpenseDraft) -> Optional[ValidationIssue]:
        if not draft.name.strip():
            return ValidationIssue(
                field="name",
                issue_type="missing",
                message="Expense name is required",
            )
        return None

    def _check_amount(self, draft: ExpenseDraft) -> Optional[ValidationIssue]:
        if not draft.amount.strip():
            return ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
            )
        amount = parse_amount(draft.amount)
        if amount is None:
            return ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"Amount ({draft.amount.strip()}) is not a number",
            )
        if amount <= 0:
            return ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
            )
        if amount > MAX_AMOUNT:
            return ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message=f"Amount must be at most {MAX_AMOUNT}",
            )
        return None

    def _check_category(self, draft: ExpenseDraft) -> Optional[ValidationIssue]:
        if not draft.category.strip():
            return ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
            )
        if parse_category(draft.category, self._categories) is None:
            return ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=f"Unknown category: {draft.category}",
            )
        return None

    def _check_date(self, draft: ExpenseDraft) -> Optional[ValidationIssue]:
        if not draft.date.strip():
            return ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
            )
        if parse_date(draft.date) is None:
            return ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"Date ({draft.date.strip()}) must be a calendar date (YYYY-MM-DD)",
            )
        return None

    def validate(self, draft: ExpenseDraft) -> ValidationResult:
        """
        Validate every field of a draft.

        Args:
            draft: Raw form input

        Returns:
            ValidationResult with one flag per field and one issue per
            invalid field
        """
        name_issue = self._check_name(draft)
        amount_issue = self._check_amount(draft)
        category_issue = self._check_category(draft)
        date_issue = self._check_date(draft)

        issues = [
            issue
            for issue in (name_issue, amount_issue, category_issue, date_issue)
            if issue is not None
        ]

        return ValidationResult(
            name_valid=name_issue is None,
            amount_valid=amount_issue is None,
            category_valid=category_issue is None,
            date_valid=date_issue is None,
            issues=issues,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        Generate a summary of a validation result for display.
        """
        if result.is_valid:
            return "All fields look good."

        lines = ["Please fix the following:"]
        for issue in result.issues:
            lines.append(f"   • {issue.message}")
        return "\n".join(lines)
