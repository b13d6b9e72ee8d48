"""
Core Data Models for the Expense Ledger

These models define the schemas for everything flowing through the ledger:
1. Raw form input (ExpenseDraft) - untrusted, possibly empty or malformed
2. Accepted records (ExpenseRecord) - canonical, immutable
3. Validation outcomes (ValidationResult, Rejected) - returned, never raised

DESIGN DECISION: Money is stored as Decimal quantized to cents.
Floats are never used for amounts or totals, so repeated additions
cannot drift.
"""

from datetime import date as Date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)

from expense_ledger.exceptions import UnknownFieldError
from expense_ledger.formatting import format_amount


CENTS = Decimal("0.01")

# Largest accepted amount: 12 integer digits. Totals of many such amounts
# stay well inside the 28-digit decimal context, so sums remain exact.
MAX_AMOUNT = Decimal("999999999999.99")

# Fields a draft carries, in form order.
DRAFT_FIELDS = ("name", "amount", "category", "date")


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    DESIGN DECISION: Values are the labels shown in the category select,
    so a raw form value maps straight onto a member.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    HEALTH = "Health"
    SHOPPING = "Shopping"
    OTHER = "Other"


class SortDirection(str, Enum):
    """Direction of a sorted view."""
    ASC = "asc"
    DESC = "desc"


class SortKey(str, Enum):
    """Record attribute a view can be sorted by."""
    AMOUNT = "amount"
    DATE = "date"


def quantize_amount(value: Decimal) -> Decimal:
    """Round an amount to cents (half up)."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


# =============================================================================
# DRAFT - raw form input
# =============================================================================

class ExpenseDraft(BaseModel):
    """
    Unvalidated form input.

    CRITICAL: A draft is never stored. It must pass through Ledger.add,
    which re-validates it, before anything enters the ledger.

    Every field is raw text, exactly as the form would submit it.
    """
    model_config = ConfigDict(frozen=True)

    name: str = ""
    amount: str = ""
    category: str = ""
    date: str = ""

    @field_validator("name", "amount", "category", "date", mode="before")
    @classmethod
    def coerce_to_text(cls, v: Any) -> str:
        """Accept typed values (Decimal, date, enum) as their text form."""
        if v is None:
            return ""
        if isinstance(v, Enum):
            return str(v.value)
        if isinstance(v, Date):
            return v.isoformat()
        return v if isinstance(v, str) else str(v)


# =============================================================================
# CORE RECORD MODEL
# =============================================================================

class ExpenseRecord(BaseModel):
    """
    An expense accepted into the ledger.

    Only Ledger.add creates these, after validation, so every field
    is already in canonical form.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int = Field(
        ...,
        ge=1,
        description="Ledger-assigned identifier, never reused"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Expense label"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        le=MAX_AMOUNT,
        decimal_places=2,
        description="Amount in currency units, quantized to cents"
    )
    category: ExpenseCategory
    date: Date = Field(
        ...,
        description="Calendar date of the expense"
    )

    @property
    def display_amount(self) -> str:
        """Amount as plain decimal text, without currency symbol."""
        return format_amount(self.amount)

    def to_row(self) -> dict[str, str]:
        """Convert to a table row of display strings."""
        return {
            "id": str(self.id),
            "name": self.name,
            "amount": self.display_amount,
            "category": self.category.value,
            "date": self.date.isoformat(),
        }


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single invalid field found in a draft."""

    field: str = Field(
        ...,
        description="Draft field with the issue"
    )
    issue_type: str = Field(
        ...,
        pattern="^(missing|invalid_format|invalid_value|unknown_category)$",
        description="Type of issue"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """
    Per-field validation outcome for one draft.

    All four flags are always reported, so a form can mark every bad
    input at once. is_valid is derived from them, never passed in.
    """
    model_config = ConfigDict(frozen=True)

    name_valid: bool
    amount_valid: bool
    category_valid: bool
    date_valid: bool

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="One issue per invalid field"
    )

    @computed_field
    @property
    def is_valid(self) -> bool:
        return (
            self.name_valid
            and self.amount_valid
            and self.category_valid
            and self.date_valid
        )

    @property
    def invalid_fields(self) -> dict[str, bool]:
        """Field name -> True when the field is invalid (aria-invalid)."""
        return {
            field: not getattr(self, f"{field}_valid")
            for field in DRAFT_FIELDS
        }

    def is_field_invalid(self, field: str) -> bool:
        """Check a single field's invalid flag."""
        if field not in DRAFT_FIELDS:
            raise UnknownFieldError(field)
        return not getattr(self, f"{field}_valid")

    def message_for(self, field: str) -> Optional[str]:
        """First issue message for a field, if any."""
        for issue in self.issues:
            if issue.field == field:
                return issue.message
        return None

    @property
    def error_count(self) -> int:
        return sum(1 for invalid in self.invalid_fields.values() if invalid)


class Rejected(BaseModel):
    """
    Outcome of Ledger.add for an invalid draft.

    Nothing was stored. Falsy, so callers can branch on the add result
    directly.
    """
    model_config = ConfigDict(frozen=True)

    validation: ValidationResult

    @property
    def invalid_fields(self) -> dict[str, bool]:
        return self.validation.invalid_fields

    @property
    def issues(self) -> list[ValidationIssue]:
        return self.validation.issues

    def __bool__(self) -> bool:
        return False
