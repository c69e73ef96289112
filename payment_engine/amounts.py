"""
Amount Handling Module

Parsing and formatting of monetary amounts. All amounts are Decimal values
taken verbatim from their textual form; nothing is rounded while records are
being applied. NEVER uses float for monetary values.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional
import re


ZERO = Decimal('0')

# Plain ASCII decimal notation with optional exponent; no digit grouping
AMOUNT_PATTERN = re.compile(r'[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?', re.ASCII)


def parse_amount(value: str) -> Decimal:
    """
    Convert a textual amount to Decimal

    Args:
        value: String representation of the amount, surrounding whitespace allowed

    Returns:
        Decimal value

    Raises:
        ValueError: If the string is empty, not a number, or not finite
    """
    if not value or not isinstance(value, str) or not value.strip():
        raise ValueError("Amount must be a non-empty string")

    text = value.strip()
    if not AMOUNT_PATTERN.fullmatch(text):
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    if not amount.is_finite():
        raise ValueError(f"Amount '{value}' is not a finite number")

    return amount


def format_amount(amount: Decimal, decimal_places: Optional[int] = None) -> str:
    """
    Render an amount for output

    Args:
        amount: Decimal to render
        decimal_places: Quantize to this many places (ROUND_HALF_UP) when given

    Returns:
        Plain (non-scientific) string form of the amount
    """
    if decimal_places is not None:
        if decimal_places < 0:
            raise ValueError("decimal_places must be non-negative")
        try:
            amount = amount.quantize(Decimal('0.1') ** decimal_places, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            # Too many digits for the context; emit the exact value instead
            pass
    # Negative zero reads badly in a balance column
    if amount == ZERO:
        amount = abs(amount)
    return f"{amount:f}"
