"""SQLAlchemy implementation of MarketplaceStore."""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from marketplace.models import (
    Product, Discount, DiscountStatus,
    VendorProductDiscount, VendorCategoryDiscount, VendorBrandDiscount,
    Coupon, DiscountUsage,
    DeliveryRate, ProductDeliveryOption, ProductDeliveryZone, PickupLocation,
    Review
)
from marketplace.stores.base import MarketplaceStore, DeliveryLane

logger = logging.getLogger(__name__)


class SqlAlchemyStore(MarketplaceStore):
    """Store backed by a SQLAlchemy session (normally the request's scoped session)."""

    def __init__(self, session: Session):
        self.session = session

    # Catalog

    def get_product(self, product_id):
        return self.session.query(Product).filter(Product.id == product_id).first()

    def get_product_by_slug(self, slug: str):
        return self.session.query(Product).filter(Product.slug == slug).first()

    # Discounts

    def _applicable_discounts(self, now: datetime):
        """Base query with the active-flag, status and time-window filters."""
        return self.session.query(Discount).filter(
            Discount.is_active == True,
            Discount.status == DiscountStatus.ACTIVE.value,
            Discount.start_date <= now,
            or_(Discount.end_date.is_(None), Discount.end_date >= now)
        )

    def find_global_discounts(self, now: datetime) -> List[Discount]:
        return self._applicable_discounts(now).filter(
            Discount.is_global == True
        ).order_by(Discount.id).all()

    def find_product_discounts(self, product_id, vendor_id, now: datetime) -> List[Discount]:
        return (
            self._applicable_discounts(now)
            .join(VendorProductDiscount, VendorProductDiscount.discount_id == Discount.id)
            .filter(VendorProductDiscount.product_id == product_id)
            .filter(VendorProductDiscount.vendor_id == vendor_id)  # no cross-vendor leakage
            .order_by(Discount.id)
            .all()
        )

    def find_category_discounts(self, category_id, vendor_id, now: datetime) -> List[Discount]:
        return (
            self._applicable_discounts(now)
            .join(VendorCategoryDiscount, VendorCategoryDiscount.discount_id == Discount.id)
            .filter(VendorCategoryDiscount.category_id == category_id)
            .filter(VendorCategoryDiscount.vendor_id == vendor_id)
            .order_by(Discount.id)
            .all()
        )

    def find_brand_discounts(self, brand_id, vendor_id, now: datetime) -> List[Discount]:
        return (
            self._applicable_discounts(now)
            .join(VendorBrandDiscount, VendorBrandDiscount.discount_id == Discount.id)
            .filter(VendorBrandDiscount.brand_id == brand_id)
            .filter(VendorBrandDiscount.vendor_id == vendor_id)
            .order_by(Discount.id)
            .all()
        )

    def find_vendor_discounts(self, vendor_id, now: datetime) -> List[Discount]:
        return self._applicable_discounts(now).filter(
            Discount.vendor_id == vendor_id
        ).order_by(Discount.id).all()

    # Coupons

    def get_coupon_by_code(self, code: str) -> Optional[Coupon]:
        return self.session.query(Coupon).filter(
            Coupon.code == code,
            Coupon.is_active == True,
            Coupon.status == DiscountStatus.ACTIVE.value
        ).first()

    def count_coupon_usage(self, user_id: str, coupon_id) -> int:
        return self.session.query(func.count(DiscountUsage.id)).filter(
            DiscountUsage.user_id == user_id,
            DiscountUsage.coupon_id == coupon_id
        ).scalar() or 0

    def record_coupon_usage(self, user_id: str, coupon_id, limit: Optional[int],
                            discount_amount: Decimal, order_id: Optional[str] = None):
        try:
            # Row lock on the coupon serializes concurrent redemptions of it
            self.session.query(Coupon).filter(Coupon.id == coupon_id).with_for_update().one()
            
            if limit:
                used = self.count_coupon_usage(user_id, coupon_id)
                if used >= limit:
                    self.session.rollback()
                    return None
            
            usage = DiscountUsage(
                user_id=user_id,
                coupon_id=coupon_id,
                order_id=order_id,
                discount_amount=discount_amount
            )
            self.session.add(usage)
            self.session.commit()
            return usage
        except Exception:
            self.session.rollback()
            raise

    # Delivery

    def find_delivery_zone(self, product_id, city: str, country: str) -> Optional[ProductDeliveryZone]:
        return self.session.query(ProductDeliveryZone).filter(
            ProductDeliveryZone.product_id == product_id,
            ProductDeliveryZone.city == city,
            ProductDeliveryZone.country == country,
            ProductDeliveryZone.is_allowed == True
        ).first()

    def find_delivery_lanes(self, product_id) -> List[DeliveryLane]:
        rows = (
            self.session.query(ProductDeliveryOption, DeliveryRate)
            .join(DeliveryRate, DeliveryRate.id == ProductDeliveryOption.delivery_rate_id)
            .filter(ProductDeliveryOption.product_id == product_id)
            .filter(DeliveryRate.is_active == True)
            .order_by(ProductDeliveryOption.id)
            .all()
        )
        lanes = []
        for option, rate in rows:
            method = rate.delivery_method
            lanes.append(DeliveryLane(
                option_id=option.id,
                is_free_delivery=bool(option.is_free_delivery),
                rate_id=rate.id,
                pickup_city=rate.pickup_city,
                delivery_city=rate.delivery_city,
                price=rate.price,
                estimated_min_days=rate.estimated_min_days,
                estimated_max_days=rate.estimated_max_days,
                delivery_method_id=method.id if method else None,
                delivery_method_name=method.name if method else None,
            ))
        return lanes

    def find_pickup_locations(self, cities: Iterable[str]) -> List[PickupLocation]:
        cities = list(cities)
        if not cities:
            return []
        return self.session.query(PickupLocation).filter(
            PickupLocation.city.in_(cities),
            PickupLocation.is_active == True
        ).order_by(PickupLocation.id).all()

    # Reviews

    def find_approved_ratings(self, product_id=None, vendor_id=None) -> List[int]:
        query = self.session.query(Review.rating).filter(Review.is_approved == True)
        if product_id is not None:
            query = query.filter(Review.product_id == product_id)
        if vendor_id is not None:
            query = query.join(Product, Product.id == Review.product_id).filter(Product.vendor_id == vendor_id)
        return [row.rating for row in query.all()]

    def find_approved_ratings_by_product(self, product_ids):
        product_ids = list(product_ids)
        if not product_ids:
            return []
        rows = self.session.query(Review.product_id, Review.rating).filter(
            Review.product_id.in_(product_ids),
            Review.is_approved == True
        ).all()
        return [(row.product_id, row.rating) for row in rows]
