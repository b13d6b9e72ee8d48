"""
Display Formatting

Amounts are shown as plain decimal text:
- whole values without a decimal point ("20")
- fractional values with exactly two digits ("50.75", "20.50")

No currency symbol and no thousands separator.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union


TOTAL_LABEL_PREFIX = "Total Expenses: "


def format_amount(value: Union[Decimal, int, str]) -> str:
    """Render an amount with the minimal two-decimal representation."""
    amount = Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if amount == amount.to_integral_value():
        return f"{amount:.0f}"
    return f"{amount:.2f}"


def format_total_label(value: Union[Decimal, int, str]) -> str:
    """Render the aggregate label, e.g. 'Total Expenses: 50.75'."""
    return f"{TOTAL_LABEL_PREFIX}{format_amount(value)}"
