"""Shared discount arithmetic used by product, coupon and order pricing."""
from datetime import datetime
from decimal import Decimal

from marketplace.models import DiscountType, DiscountStatus
from marketplace.utils.dates import as_utc
from marketplace.utils.money import to_decimal, ZERO

HUNDRED = Decimal('100')


def compute_discount_amount(price, kind: str, value, maximum_discount_amount=None) -> Decimal:
    """
    Amount a single discount takes off `price`.

    - percentage: price * value / 100, capped by maximum_discount_amount when set
    - fixed_amount: value, never more than the price itself
    - free_shipping (and anything unknown): 0, it is a delivery-side benefit
    """
    price = to_decimal(price)
    value = to_decimal(value)
    
    if kind == DiscountType.PERCENTAGE.value:
        amount = price * value / HUNDRED
        if maximum_discount_amount is not None:
            amount = min(amount, to_decimal(maximum_discount_amount))
        return max(amount, ZERO)
    
    if kind == DiscountType.FIXED_AMOUNT.value:
        return max(min(value, price), ZERO)
    
    return ZERO


def discount_amount_for(price, discount) -> Decimal:
    """compute_discount_amount for a Discount/Coupon-like row."""
    return compute_discount_amount(
        price,
        discount.type,
        discount.value,
        getattr(discount, 'maximum_discount_amount', None)
    )


def apply_discount(price, amount) -> Decimal:
    """Final price after taking `amount` off, floored at zero."""
    return max(ZERO, to_decimal(price) - to_decimal(amount))


def in_time_window(start_date, end_date, now: datetime) -> bool:
    """start_date <= now and (no end_date or end_date >= now). A missing start is open."""
    now = as_utc(now)
    if start_date is not None and as_utc(start_date) > now:
        return False
    if end_date is not None and as_utc(end_date) < now:
        return False
    return True


def is_applicable(discount, now: datetime) -> bool:
    """Active flag, active status and time window must all hold."""
    return (
        bool(discount.is_active)
        and discount.status == DiscountStatus.ACTIVE.value
        and discount.start_date is not None
        and in_time_window(discount.start_date, discount.end_date, now)
    )
