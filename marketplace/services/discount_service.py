"""
Discount resolution.

Single implementation shared by product detail, product-discount endpoints
and order pricing: enumerate every applicable discount for a product,
deduplicate, and pick the one that takes the most off the price.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from marketplace.exceptions import NotFoundError
from marketplace.models import DiscountType
from marketplace.services.pricing import discount_amount_for, apply_discount
from marketplace.services.catalog_service import resolve_product
from marketplace.services.coupon_service import calculate_coupon_discount
from marketplace.stores import MarketplaceStore
from marketplace.utils.dates import utcnow
from marketplace.utils.money import to_decimal, money_json, ZERO

logger = logging.getLogger(__name__)


@dataclass
class BestDiscount:
    """Outcome of best-of-N selection for one price."""
    final_price: Decimal
    discount_amount: Decimal
    best_discount: Optional[Any]
    has_discount: bool


@dataclass
class OrderDiscount:
    """Outcome of order-level pricing (coupon vs automatic discounts)."""
    discount_amount: Decimal
    final_amount: Decimal
    discount_type: str
    applied_coupon: Optional[Any] = None
    applied_discount: Optional[Any] = None


def list_applicable_discounts(store: MarketplaceStore, product, now: Optional[datetime] = None) -> List:
    """
    All discounts applicable to `product` at `now`, each exactly once.

    Paths, in insertion order: global, product-specific, category-specific,
    brand-specific, vendor-wide. Scoped paths whose product field is empty
    are skipped. A discount reachable through several paths keeps its first
    occurrence.
    """
    if not product.is_active:
        raise NotFoundError('Product not found', payload={'product': str(product.id)})
    
    now = now or utcnow()
    
    candidates = list(store.find_global_discounts(now))
    candidates.extend(store.find_product_discounts(product.id, product.vendor_id, now))
    if product.category_id:
        candidates.extend(store.find_category_discounts(product.category_id, product.vendor_id, now))
    if product.brand_id:
        candidates.extend(store.find_brand_discounts(product.brand_id, product.vendor_id, now))
    if product.vendor_id:
        candidates.extend(store.find_vendor_discounts(product.vendor_id, now))
    
    unique = {}
    for discount in candidates:
        unique.setdefault(discount.id, discount)
    
    discounts = list(unique.values())
    logger.debug(f"[DISCOUNT] product={product.id} candidates={len(candidates)} unique={len(discounts)}")
    return discounts


def calculate_best_discount(price, discounts) -> BestDiscount:
    """
    Pick the discount with the largest amount for `price`.

    Comparison is strictly greater, so among equal maxima the first one
    seen wins.
    """
    price = to_decimal(price)
    best_amount = ZERO
    best = None
    
    for discount in discounts:
        amount = discount_amount_for(price, discount)
        if amount > best_amount:
            best_amount = amount
            best = discount
    
    return BestDiscount(
        final_price=apply_discount(price, best_amount),
        discount_amount=best_amount,
        best_discount=best,
        has_discount=best_amount > 0
    )


def get_product_discounts(store: MarketplaceStore, product_ref, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Full discount payload for one product, keyed the way API consumers expect.

    Raises:
        NotFoundError: product missing or inactive.
    """
    product = resolve_product(store, product_ref)
    discounts = list_applicable_discounts(store, product, now)
    best = calculate_best_discount(product.price, discounts)
    
    return {
        'product_id': product.id,
        'price': money_json(to_decimal(product.price)),
        'discounts': [d.to_dict() for d in discounts],
        'bestDiscount': best.best_discount.to_dict() if best.best_discount else None,
        'finalPrice': money_json(best.final_price),
        'discountAmount': money_json(best.discount_amount),
        'hasDiscount': best.has_discount,
    }


def _meets_minimum(discount, order_amount: Decimal) -> bool:
    minimum = getattr(discount, 'minimum_order_amount', None)
    return not minimum or order_amount >= to_decimal(minimum)


def calculate_order_discount(order_amount, discounts, coupon=None) -> OrderDiscount:
    """
    Best single reduction for a whole order.

    The coupon (if any) is the first candidate, then every automatic
    discount whose minimum order amount is met. Strictly greater wins.
    """
    order_amount = to_decimal(order_amount)
    result = OrderDiscount(
        discount_amount=ZERO,
        final_amount=order_amount,
        discount_type=DiscountType.PERCENTAGE.value
    )
    
    if coupon is not None:
        amount = calculate_coupon_discount(coupon, order_amount)
        if amount > result.discount_amount:
            result.discount_amount = amount
            result.discount_type = coupon.type
            result.applied_coupon = coupon
    
    for discount in discounts:
        if not _meets_minimum(discount, order_amount):
            continue
        amount = discount_amount_for(order_amount, discount)
        if amount > result.discount_amount:
            result.discount_amount = amount
            result.discount_type = discount.type
            result.applied_coupon = None
            result.applied_discount = discount
    
    result.final_amount = apply_discount(order_amount, result.discount_amount)
    return result
