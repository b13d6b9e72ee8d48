"""
Ledger Exceptions

DESIGN DECISION: Bad user input is never an exception here.
Drafts that fail validation come back as ValidationResult / Rejected
values. These exceptions only signal programming errors at the API
boundary.
"""


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class UnknownFieldError(LedgerError, KeyError):
    """A caller named a draft field that does not exist."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(
            f"Unknown expense field: {field!r}. "
            "Expected one of: name, amount, category, date"
        )

    def __str__(self) -> str:
        # KeyError would repr() the message otherwise
        return self.args[0]
