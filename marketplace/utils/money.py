"""Money helpers: everything internal is Decimal, JSON gets floats."""
from decimal import Decimal, InvalidOperation

ZERO = Decimal('0')


def to_decimal(value) -> Decimal:
    """
    Coerce a number-ish value (int, float, str, Decimal, None) to Decimal.

    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.

    Raises:
        ValueError: if the value cannot be parsed or is not finite (NaN, Infinity).
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValueError(f"Invalid amount: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return result


def money_json(value):
    """Render a Decimal for a JSON payload (None passes through)."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return float(value)
    return value
