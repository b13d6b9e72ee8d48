"""
Expense Form Session

This module ties a Ledger to the state of one expense form:
1. The draft being typed (raw field values)
2. Which fields are currently flagged invalid
3. The active view (category filter, sort order)

DESIGN DECISION: The session owns exactly one Ledger and is created
explicitly when a form is mounted. There is no module-level ledger.

The UI only talks to this class. It never inserts records itself:
every record goes through submit() -> Ledger.add(), which validates.
"""

from decimal import Decimal
from typing import Any, Optional, Union

from expense_ledger.audit import AuditLogger
from expense_ledger.config import get_settings
from expense_ledger.exceptions import UnknownFieldError
from expense_ledger.formatting import format_total_label
from expense_ledger.ledger import Ledger
from expense_ledger.models.expense import (
    DRAFT_FIELDS,
    ExpenseCategory,
    ExpenseDraft,
    ExpenseRecord,
    Rejected,
    SortDirection,
    SortKey,
)
from expense_ledger.validation import ExpenseValidator


# Fields cleared after a successful submit; category and date stay selected.
CLEARED_ON_SUBMIT = ("name", "amount")


class ExpenseFormSession:
    """
    View-model behind an expense form.

    Flow:
    1. set_field() for each input change
    2. submit() -> Ledger.add() (validates, stores or rejects)
    3. delete() on a row's delete action
    4. sort_by() / filter_by_category() change the displayed view
    5. rows(), total_label() and totals_by_category() are what the UI renders
    """

    def __init__(
        self,
        ledger: Optional[Ledger] = None,
    ):
        self._ledger = ledger or Ledger()
        self._draft = ExpenseDraft()
        self._invalid = {field: False for field in DRAFT_FIELDS}
        self._submitted = False
        self._category_filter: Optional[str] = None
        self._sort: Optional[tuple[SortKey, SortDirection]] = None

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def draft(self) -> ExpenseDraft:
        return self._draft

    @property
    def categories(self) -> tuple[ExpenseCategory, ...]:
        return self._ledger.categories

    # -------------------------------------------------------------------------
    # Form input
    # -------------------------------------------------------------------------

    def set_field(self, field: str, value: Any) -> None:
        """
        Update one draft field.

        A field that is already flagged (or any field after the first
        submit) is re-validated immediately, so its flag follows the input.
        A pristine form shows no errors while the user types.
        """
        if field not in DRAFT_FIELDS:
            raise UnknownFieldError(field)
        values = self._draft.model_dump()
        values[field] = value
        self._draft = ExpenseDraft(**values)

        if self._submitted or self._invalid[field]:
            validation = self._ledger.validate(self._draft)
            self._invalid[field] = validation.is_field_invalid(field)

    @property
    def invalid_fields(self) -> dict[str, bool]:
        """Field name -> True when flagged invalid."""
        return dict(self._invalid)

    def is_field_invalid(self, field: str) -> bool:
        if field not in DRAFT_FIELDS:
            raise UnknownFieldError(field)
        return self._invalid[field]

    def submit(self) -> Union[ExpenseRecord, Rejected]:
        """
        Add the current draft to the ledger.

        On success the name and amount inputs are cleared and all flags
        reset. On rejection every invalid field is flagged.
        """
        result = self._ledger.add(self._draft)
        if isinstance(result, Rejected):
            self._submitted = True
            self._invalid = result.invalid_fields
            return result

        values = self._draft.model_dump()
        for field in CLEARED_ON_SUBMIT:
            values[field] = ""
        self._draft = ExpenseDraft(**values)
        self._invalid = {field: False for field in DRAFT_FIELDS}
        self._submitted = False
        return result

    def delete(self, expense_id: int) -> bool:
        return self._ledger.remove(expense_id)

    # -------------------------------------------------------------------------
    # View state
    # -------------------------------------------------------------------------

    def sort_by(
        self,
        key: Union[SortKey, str],
        direction: Union[SortDirection, str] = SortDirection.ASC,
    ) -> None:
        self._sort = (SortKey(key), SortDirection(direction))

    def clear_sort(self) -> None:
        self._sort = None

    def filter_by_category(
        self,
        category: Union[ExpenseCategory, str, None] = None,
    ) -> None:
        """
        Show only one category.

        Defaults to the category currently selected in the form.
        """
        if category is None:
            category = self._draft.category
        elif isinstance(category, ExpenseCategory):
            category = category.value
        self._category_filter = category

    def clear_filter(self) -> None:
        self._category_filter = None

    @property
    def active_filter(self) -> Optional[str]:
        return self._category_filter

    @property
    def active_sort(self) -> Optional[tuple[SortKey, SortDirection]]:
        return self._sort

    def rows(self) -> list[ExpenseRecord]:
        """
        Records to display: the active filter first, then the active sort.
        """
        records = self._ledger.records()
        if self._category_filter is not None:
            records = self._ledger.filter_by_category(
                self._category_filter, records=records
            )
        if self._sort is not None:
            key, direction = self._sort
            if key == SortKey.AMOUNT:
                records = self._ledger.sort_by_amount(direction, records=records)
            else:
                records = self._ledger.sort_by_date(direction, records=records)
        return records

    def total_label(self) -> str:
        """Total over the whole ledger, regardless of the active view."""
        return format_total_label(self._ledger.total())

    def totals_by_category(self) -> dict[ExpenseCategory, Decimal]:
        """Per-category sums over the whole ledger, in order of first appearance."""
        records = self._ledger.records()
        return {
            category: self._ledger.total(
                self._ledger.filter_by_category(category, records=records)
            )
            for category in dict.fromkeys(record.category for record in records)
        }


def create_session(
    categories: Optional[list[ExpenseCategory]] = None,
    audit: bool = True,
) -> ExpenseFormSession:
    """
    Factory function to create a session with its ledger.

    Args:
        categories: Categories the form offers. Defaults to the
                    configured categories.
        audit: Whether to attach an AuditLogger to the ledger.

    Returns:
        A fresh ExpenseFormSession
    """
    settings = get_settings()
    validator = ExpenseValidator(
        categories if categories is not None else settings.categories_list
    )
    audit_logger = (
        AuditLogger(history_size=settings.audit_history_size) if audit else None
    )
    return ExpenseFormSession(Ledger(validator=validator, audit_logger=audit_logger))
