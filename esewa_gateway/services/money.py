"""
Money Utilities - Decimal-as-string amounts for the eSewa wire format.

eSewa takes every amount as a string and signs total_amount verbatim, so
amounts are kept as strings end to end. Decimal is used only to validate
and to add components together.
"""
from decimal import Decimal, InvalidOperation
from typing import Union

Amount = Union[str, int, float, Decimal]


def to_decimal(value: Union[Amount, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        # Convert via string to avoid float precision issues
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def to_wire_amount(value: Amount) -> str:
    """
    Render an amount the way it goes on the wire.

    Strings pass through (stripped) so the caller controls formatting.
    Numbers follow the gateway's own stringification: integral floats
    lose their trailing ".0" (100.0 -> "100").

    Raises:
        TypeError: For booleans and non-numeric types
    """
    if isinstance(value, bool):
        raise TypeError("amount must be a string or number, not bool")
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, Decimal):
        return format(value, "f")
    raise TypeError(f"amount must be a string or number, got {type(value).__name__}")


def parse_amount(value: Amount) -> Decimal:
    """
    Strictly parse a non-negative, finite amount.

    Raises:
        ValueError: If the value is empty, not a number, negative, NaN or infinite
    """
    text = to_wire_amount(value)
    if not text:
        raise ValueError("amount must not be empty")
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"amount {text!r} is not a number") from None
    if not parsed.is_finite():
        raise ValueError(f"amount {text!r} is not finite")
    if parsed < 0:
        raise ValueError(f"amount {text!r} must not be negative")
    return parsed


def sum_amounts(*values: Amount) -> str:
    """Add wire amounts and render the total as a plain decimal string."""
    total = sum((parse_amount(v) for v in values), Decimal("0"))
    return format(total, "f")


def amounts_equal(a: Amount, b: Amount) -> bool:
    """Compare two amounts numerically ("100" == "100.0")."""
    return to_decimal(to_wire_amount(a)) == to_decimal(to_wire_amount(b))
