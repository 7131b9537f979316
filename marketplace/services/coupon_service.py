"""Coupon validation and redemption."""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from marketplace.services.pricing import discount_amount_for
from marketplace.stores import MarketplaceStore
from marketplace.utils.dates import utcnow, as_utc
from marketplace.utils.money import to_decimal, ZERO

logger = logging.getLogger(__name__)

# Reasons, in the order they are checked
REASON_NOT_FOUND = 'not_found'
REASON_NOT_STARTED = 'not_started'
REASON_EXPIRED = 'expired'
REASON_MIN_AMOUNT = 'min_amount'
REASON_USAGE_LIMIT = 'usage_limit'


@dataclass
class CouponValidation:
    valid: bool
    reason: Optional[str] = None
    coupon: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        rv = {'valid': self.valid}
        if self.reason:
            rv['reason'] = self.reason
        if self.coupon is not None:
            rv['coupon'] = self.coupon.to_dict()
        return rv


def calculate_coupon_discount(coupon, order_amount) -> Decimal:
    """Amount the coupon takes off the order; 0 below its minimum order amount."""
    order_amount = to_decimal(order_amount)
    minimum = coupon.minimum_order_amount
    if minimum and order_amount < to_decimal(minimum):
        return ZERO
    return discount_amount_for(order_amount, coupon)


def validate_coupon(store: MarketplaceStore, code: str, user_id: Optional[str], order_amount,
                    now: Optional[datetime] = None) -> CouponValidation:
    """
    Sequential guard chain; the first failing check decides the reason.

    not_found -> not_started -> expired -> min_amount -> usage_limit.
    The usage check needs a user; anonymous validation skips it.
    """
    now = as_utc(now or utcnow())
    order_amount = to_decimal(order_amount)
    
    coupon = store.get_coupon_by_code(code)
    if coupon is None:
        return CouponValidation(False, REASON_NOT_FOUND)
    
    if coupon.start_date and as_utc(coupon.start_date) > now:
        return CouponValidation(False, REASON_NOT_STARTED)
    
    if coupon.end_date and as_utc(coupon.end_date) < now:
        return CouponValidation(False, REASON_EXPIRED)
    
    if coupon.minimum_order_amount and order_amount < to_decimal(coupon.minimum_order_amount):
        return CouponValidation(False, REASON_MIN_AMOUNT)
    
    if user_id is not None and coupon.usage_limit_per_user:
        used = store.count_coupon_usage(user_id, coupon.id)
        if used >= coupon.usage_limit_per_user:
            return CouponValidation(False, REASON_USAGE_LIMIT)
    
    return CouponValidation(True, coupon=coupon)


def redeem_coupon(store: MarketplaceStore, code: str, user_id: str, order_amount,
                  order_id: Optional[str] = None, now: Optional[datetime] = None):
    """
    Validate and record one redemption.

    The usage limit is enforced again inside the store's atomic write, so
    two concurrent redemptions cannot both slip past it.

    Returns:
        (CouponValidation, DiscountUsage or None)
    """
    validation = validate_coupon(store, code, user_id, order_amount, now)
    if not validation.valid:
        logger.info(f"[COUPON] Rejected code={code!r} user={user_id} reason={validation.reason}")
        return validation, None
    
    coupon = validation.coupon
    amount = calculate_coupon_discount(coupon, order_amount)
    usage = store.record_coupon_usage(
        user_id,
        coupon.id,
        coupon.usage_limit_per_user,
        discount_amount=amount,
        order_id=order_id
    )
    if usage is None:
        logger.warning(f"[COUPON] Lost redemption race code={code!r} user={user_id}")
        return CouponValidation(False, REASON_USAGE_LIMIT), None
    
    logger.info(f"[COUPON] Redeemed code={code!r} user={user_id} amount={amount}")
    return validation, usage
