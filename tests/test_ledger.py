"""Tests for the Ledger: mutations, totals and derived views."""

import pytest
from datetime import date
from decimal import Decimal

from expense_ledger.formatting import format_total_label
from expense_ledger.ledger import Ledger
from expense_ledger.models.audit import AuditEventType
from expense_ledger.models.expense import (
    MAX_AMOUNT,
    ExpenseCategory,
    ExpenseDraft,
    ExpenseRecord,
    Rejected,
    SortDirection,
)


def names(records):
    return [record.name for record in records]


class TestAdd:
    """Tests for Ledger.add."""

    def test_add_returns_stored_record(self, ledger, make_draft):
        record = ledger.add(make_draft())
        assert isinstance(record, ExpenseRecord)
        assert record.name == "Lunch"
        assert record.display_amount == "20"
        assert record.category == ExpenseCategory.FOOD
        assert record.date == date(2025, 1, 19)
        assert ledger.get(record.id) == record
        assert len(ledger) == 1

    @pytest.mark.parametrize("amount", ["20", "0.01", "20.50", "1999.99"])
    def test_add_increases_total_by_amount(self, ledger, make_draft, amount):
        ledger.add(make_draft(name="Existing", amount="5"))
        before = ledger.total()
        ledger.add(make_draft(amount=amount))
        assert ledger.total() - before == Decimal(amount)

    @pytest.mark.parametrize("overrides", [
        {"amount": "-10"},
        {"amount": "0"},
        {"amount": "abc"},
        {"amount": "1000000000000"},
        {"name": ""},
        {"name": "   "},
        {"category": "Gadgets"},
        {"category": ""},
        {"date": ""},
        {"date": "not-a-date"},
        {"date": "2025-W03-1"},
    ])
    def test_invalid_draft_changes_nothing(self, ledger, make_draft, overrides):
        ledger.add(make_draft(name="Existing"))
        size, total = len(ledger), ledger.total()

        result = ledger.add(make_draft(**overrides))

        assert isinstance(result, Rejected)
        assert not result
        assert list(overrides)[0] in [
            field for field, invalid in result.invalid_fields.items() if invalid
        ]
        assert len(ledger) == size
        assert ledger.total() == total

    def test_add_revalidates(self, ledger, make_draft):
        """Test add never trusts an earlier validation of another draft."""
        assert ledger.validate(make_draft()).is_valid
        assert isinstance(ledger.add(make_draft(amount="-1")), Rejected)

    def test_add_stores_canonical_values(self, ledger, make_draft):
        record = ledger.add(make_draft(name="  Coffee ", amount=" 3.5 ", date=" 2025-01-19 "))
        assert record.name == "Coffee"
        assert record.amount == Decimal("3.50")
        assert record.date == date(2025, 1, 19)

    def test_add_rounds_to_cents(self, ledger, make_draft):
        record = ledger.add(make_draft(amount="10.125"))
        assert record.amount == Decimal("10.13")

    def test_ids_are_unique_and_never_reused(self, ledger, make_draft):
        first = ledger.add(make_draft(name="A"))
        second = ledger.add(make_draft(name="B"))
        ledger.remove(second.id)
        third = ledger.add(make_draft(name="C"))
        assert len({first.id, second.id, third.id}) == 3
        assert third.id > second.id

    def test_add_appends_in_insertion_order(self, ledger, make_draft):
        for name in ["A", "B", "C"]:
            ledger.add(make_draft(name=name))
        assert names(ledger.records()) == ["A", "B", "C"]
        assert names(ledger) == ["A", "B", "C"]


class TestRemove:
    """Tests for Ledger.remove."""

    def test_remove_existing(self, ledger, make_draft):
        record = ledger.add(make_draft())
        assert ledger.remove(record.id) is True
        assert record.id not in ledger
        assert ledger.get(record.id) is None

    def test_remove_is_idempotent(self, ledger, make_draft):
        record = ledger.add(make_draft())
        ledger.remove(record.id)
        size, total = len(ledger), ledger.total()
        assert ledger.remove(record.id) is False
        assert ledger.remove(999) is False
        assert len(ledger) == size
        assert ledger.total() == total

    def test_delete_first_of_two_updates_total(self, ledger, make_draft):
        first = ledger.add(make_draft(name="Expense 1", amount="20.50"))
        ledger.add(make_draft(name="Expense 2", amount="30.25"))
        assert ledger.total() == Decimal("50.75")

        ledger.remove(first.id)

        assert ledger.total() == Decimal("30.25")


class TestTotals:
    """Tests for Ledger.total."""

    def test_empty_total(self, ledger):
        assert ledger.total() == Decimal("0.00")

    def test_no_float_drift(self, ledger, make_draft):
        for _ in range(10):
            ledger.add(make_draft(amount="0.10"))
        assert ledger.total() == Decimal("1.00")

    def test_total_of_view(self, ledger, make_draft):
        ledger.add(make_draft(name="Lunch", amount="20", category="Food"))
        ledger.add(make_draft(name="Bus", amount="5", category="Transport"))
        assert ledger.total(ledger.filter_by_category("Food")) == Decimal("20.00")

    def test_total_of_largest_amounts_is_exact(self, ledger, make_draft):
        for _ in range(100):
            ledger.add(make_draft(amount=str(MAX_AMOUNT)))
        assert ledger.total() == MAX_AMOUNT * 100
        assert format_total_label(ledger.total()) == "Total Expenses: 99999999999999"


class TestSorting:
    """Tests for sort_by_amount and sort_by_date."""

    def test_sort_by_amount_ascending(self, ledger, make_draft):
        ledger.add(make_draft(name="Lunch", amount="20"))
        ledger.add(make_draft(name="Coffee", amount="10"))
        assert names(ledger.sort_by_amount()) == ["Coffee", "Lunch"]

    def test_sort_by_amount_descending(self, ledger, make_draft):
        ledger.add(make_draft(name="Coffee", amount="10"))
        ledger.add(make_draft(name="Lunch", amount="20"))
        assert names(ledger.sort_by_amount(SortDirection.DESC)) == ["Lunch", "Coffee"]
        assert names(ledger.sort_by_amount("desc")) == ["Lunch", "Coffee"]

    def test_sort_by_amount_is_numeric(self, ledger, make_draft):
        ledger.add(make_draft(name="Big", amount="100"))
        ledger.add(make_draft(name="Small", amount="9.99"))
        assert names(ledger.sort_by_amount()) == ["Small", "Big"]

    def test_sort_is_stable_on_ties(self, ledger, make_draft):
        for name in ["A", "B", "C"]:
            ledger.add(make_draft(name=name, amount="10"))
        ledger.add(make_draft(name="Cheap", amount="1"))
        assert names(ledger.sort_by_amount()) == ["Cheap", "A", "B", "C"]
        assert names(ledger.sort_by_amount("desc")) == ["A", "B", "C", "Cheap"]

    def test_sort_by_date_ascending(self, ledger, make_draft):
        ledger.add(make_draft(name="Current Expense", date="2025-01-19"))
        ledger.add(make_draft(name="Future Expense", date="2026-01-19"))
        ledger.add(make_draft(name="Past Expense", date="2024-01-19"))
        assert names(ledger.sort_by_date()) == [
            "Past Expense", "Current Expense", "Future Expense",
        ]

    def test_sort_by_date_descending_stable(self, ledger, make_draft):
        ledger.add(make_draft(name="A", date="2025-01-19"))
        ledger.add(make_draft(name="B", date="2025-01-19"))
        ledger.add(make_draft(name="Later", date="2025-03-01"))
        assert names(ledger.sort_by_date("desc")) == ["Later", "A", "B"]

    def test_sort_does_not_mutate_storage(self, ledger, make_draft):
        ledger.add(make_draft(name="Lunch", amount="20"))
        ledger.add(make_draft(name="Coffee", amount="10"))
        ledger.sort_by_amount()
        assert names(ledger.records()) == ["Lunch", "Coffee"]

    def test_invalid_direction(self, ledger):
        with pytest.raises(ValueError):
            ledger.sort_by_amount("sideways")


class TestFiltering:
    """Tests for filter_by_category and filter_by_date_range."""

    @pytest.fixture
    def filled(self, ledger, make_draft):
        ledger.add(make_draft(name="Lunch", amount="20", category="Food"))
        ledger.add(make_draft(name="Bus Ticket", amount="5", category="Transport"))
        ledger.add(make_draft(name="Coffee", amount="10", category="Food"))
        return ledger

    def test_filter_by_category(self, filled):
        food = filled.filter_by_category("Food")
        assert names(food) == ["Lunch", "Coffee"]
        assert all(record.category != ExpenseCategory.TRANSPORT for record in food)

    def test_filter_accepts_enum(self, filled):
        assert names(filled.filter_by_category(ExpenseCategory.TRANSPORT)) == ["Bus Ticket"]

    @pytest.mark.parametrize("category", ["", None, "Gadgets", "food"])
    def test_unknown_category_yields_empty(self, filled, category):
        assert filled.filter_by_category(category) == []

    def test_newly_added_record_is_in_its_category(self, ledger, make_draft):
        for category in ExpenseCategory:
            record = ledger.add(make_draft(name=f"{category.value} item", category=category))
            assert record in ledger.filter_by_category(record.category)

    def test_filter_then_sort(self, filled):
        view = filled.sort_by_amount(records=filled.filter_by_category("Food"))
        assert names(view) == ["Coffee", "Lunch"]

    def test_sort_then_filter(self, filled):
        view = filled.filter_by_category("Food", records=filled.sort_by_amount())
        assert names(view) == ["Coffee", "Lunch"]

    def test_filter_by_date_range_is_inclusive(self, ledger, make_draft):
        ledger.add(make_draft(name="Past", date="2024-01-19"))
        ledger.add(make_draft(name="Current", date="2025-01-19"))
        ledger.add(make_draft(name="Future", date="2026-01-19"))

        view = ledger.filter_by_date_range(date(2024, 1, 19), date(2025, 1, 19))
        assert names(view) == ["Past", "Current"]
        assert names(ledger.filter_by_date_range(start=date(2025, 1, 1))) == ["Current", "Future"]
        assert names(ledger.filter_by_date_range(end=date(2024, 12, 31))) == ["Past"]
        assert len(ledger.filter_by_date_range()) == 3

    def test_filter_by_reversed_range_is_empty(self, filled):
        assert filled.filter_by_date_range(date(2026, 1, 1), date(2025, 1, 1)) == []


class TestLedgerAudit:
    """Tests for the audit trail a ledger writes."""

    def test_mutations_are_audited(self, ledger, audit_logger, make_draft):
        record = ledger.add(make_draft())
        ledger.add(ExpenseDraft())
        ledger.remove(record.id)
        ledger.remove(record.id)

        assert [event.event_type for event in audit_logger.events] == [
            AuditEventType.EXPENSE_ADDED,
            AuditEventType.EXPENSE_REJECTED,
            AuditEventType.EXPENSE_REMOVED,
            AuditEventType.EXPENSE_REMOVE_MISSED,
        ]
        assert all(
            event.correlation_id == audit_logger.correlation_id
            for event in audit_logger.events
        )

    def test_queries_are_not_audited(self, ledger, audit_logger, make_draft):
        ledger.add(make_draft())
        ledger.sort_by_amount()
        ledger.filter_by_category("Food")
        ledger.total()
        assert len(audit_logger.events) == 1

    def test_ledger_without_audit_logger(self, make_draft):
        ledger = Ledger()
        record = ledger.add(make_draft())
        assert ledger.remove(record.id) is True
