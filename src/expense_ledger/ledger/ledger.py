"""
The Expense Ledger

An in-memory collection of expense records plus pure derived views.

DESIGN DECISION: add() is the single gate into the ledger.
It re-validates every draft (a stale ValidationResult is never trusted)
and is atomic: either the whole record is stored or nothing changes.

Derived views (sorted, filtered) always return new lists. Storage order
is insertion order and no view ever changes it. Every view accepts an
optional `records` sequence, so views compose in whatever order the
caller applies them:

    ledger.sort_by_amount(records=ledger.filter_by_category("Food"))
"""

from datetime import date
from decimal import Decimal
from itertools import count
from typing import Iterable, Iterator, Optional, Sequence, Union

import structlog

from expense_ledger.audit import AuditLogger
from expense_ledger.models.expense import (
    ExpenseCategory,
    ExpenseDraft,
    ExpenseRecord,
    Rejected,
    SortDirection,
    ValidationResult,
)
from expense_ledger.validation import (
    ExpenseValidator,
    parse_amount,
    parse_category,
    parse_date,
)


logger = structlog.get_logger(__name__)

ZERO = Decimal("0.00")


class Ledger:
    """
    Session-scoped expense ledger.

    State is a mapping of id -> ExpenseRecord in insertion order.
    Ids come from a monotonic counter and are never reused, not even
    after remove().
    """

    def __init__(
        self,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger
        self._records: dict[int, ExpenseRecord] = {}
        self._ids = count(1)

    # -------------------------------------------------------------------------
    # Container protocol
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ExpenseRecord]:
        return iter(list(self._records.values()))

    def __contains__(self, expense_id: object) -> bool:
        return expense_id in self._records

    @property
    def categories(self) -> tuple[ExpenseCategory, ...]:
        """Categories this ledger accepts."""
        return self._validator.categories

    def records(self) -> list[ExpenseRecord]:
        """All records in insertion order."""
        return list(self._records.values())

    def get(self, expense_id: int) -> Optional[ExpenseRecord]:
        return self._records.get(expense_id)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def validate(self, draft: ExpenseDraft) -> ValidationResult:
        """Validate a draft. No side effects."""
        return self._validator.validate(draft)

    def add(self, draft: ExpenseDraft) -> Union[ExpenseRecord, Rejected]:
        """
        Validate a draft and store it.

        Returns:
            The stored ExpenseRecord, or Rejected (carrying the per-field
            flags) if the draft is invalid. A rejected draft changes nothing.
        """
        validation = self._validator.validate(draft)
        if not validation.is_valid:
            invalid = [
                field for field, flag in validation.invalid_fields.items() if flag
            ]
            logger.debug("expense_rejected", invalid_fields=invalid)
            if self._audit_logger:
                self._audit_logger.log_expense_rejected(invalid)
            return Rejected(validation=validation)

        # Validation passed, so every parse below succeeds
        record = ExpenseRecord(
            id=next(self._ids),
            name=draft.name.strip(),
            amount=parse_amount(draft.amount),
            category=parse_category(draft.category, self._validator.categories),
            date=parse_date(draft.date),
        )
        self._records[record.id] = record

        logger.debug("expense_added", expense_id=record.id, count=len(self._records))
        if self._audit_logger:
            self._audit_logger.log_expense_added(
                expense_id=record.id,
                name=record.name,
                amount=record.display_amount,
                category=record.category.value,
            )
        return record

    def remove(self, expense_id: int) -> bool:
        """
        Delete a record.

        Returns:
            True if a record was deleted. Unknown ids are a no-op.
        """
        record = self._records.pop(expense_id, None)
        if record is None:
            if self._audit_logger:
                self._audit_logger.log_expense_remove_missed(expense_id)
            return False

        if self._audit_logger:
            self._audit_logger.log_expense_removed(
                expense_id=record.id,
                name=record.name,
                amount=record.display_amount,
            )
        return True

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def total(self, records: Optional[Iterable[ExpenseRecord]] = None) -> Decimal:
        """Sum of amounts, computed from current state on every call."""
        source = self._records.values() if records is None else records
        return sum((record.amount for record in source), ZERO)

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def _source(
        self,
        records: Optional[Sequence[ExpenseRecord]],
    ) -> list[ExpenseRecord]:
        return self.records() if records is None else list(records)

    @staticmethod
    def _stable_sort(
        records: list[ExpenseRecord],
        key,
        direction: Union[SortDirection, str],
    ) -> list[ExpenseRecord]:
        descending = SortDirection(direction) == SortDirection.DESC
        # sorted(reverse=True) keeps ties in their original order
        return sorted(records, key=key, reverse=descending)

    def sort_by_amount(
        self,
        direction: Union[SortDirection, str] = SortDirection.ASC,
        records: Optional[Sequence[ExpenseRecord]] = None,
    ) -> list[ExpenseRecord]:
        """Records ordered by amount. Stable on ties."""
        return self._stable_sort(
            self._source(records), lambda record: record.amount, direction
        )

    def sort_by_date(
        self,
        direction: Union[SortDirection, str] = SortDirection.ASC,
        records: Optional[Sequence[ExpenseRecord]] = None,
    ) -> list[ExpenseRecord]:
        """Records ordered chronologically. Stable on ties."""
        return self._stable_sort(
            self._source(records), lambda record: record.date, direction
        )

    def filter_by_category(
        self,
        category: Union[ExpenseCategory, str, None],
        records: Optional[Sequence[ExpenseRecord]] = None,
    ) -> list[ExpenseRecord]:
        """
        Records of one category, in the order given.

        An empty or unknown category yields an empty list, not an error.
        """
        if isinstance(category, ExpenseCategory):
            wanted = category
        else:
            wanted = parse_category(category or "", self._validator.categories)
        if wanted is None:
            return []
        return [record for record in self._source(records) if record.category == wanted]

    def filter_by_date_range(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
        records: Optional[Sequence[ExpenseRecord]] = None,
    ) -> list[ExpenseRecord]:
        """
        Records dated within [start, end], in the order given.

        Either bound may be omitted. start > end yields an empty list.
        """
        if start is not None and end is not None and start > end:
            return []
        return [
            record
            for record in self._source(records)
            if (start is None or record.date >= start)
            and (end is None or record.date <= end)
        ]
