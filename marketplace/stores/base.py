"""
Data-access interface consumed by the pricing, delivery and rating services.

Services never touch a session directly; they receive a store. Production
code uses SqlAlchemyStore, tests can substitute an in-memory implementation.
"""
import abc
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class DeliveryLane:
    """One product delivery option joined with its rate and method."""
    option_id: int
    is_free_delivery: bool
    rate_id: int
    pickup_city: str
    delivery_city: str
    price: Decimal
    estimated_min_days: int
    estimated_max_days: int
    delivery_method_id: Optional[int]
    delivery_method_name: Optional[str]


class MarketplaceStore(abc.ABC):
    """Row-level reads (and the single coupon-usage write) the services need."""

    # Catalog

    @abc.abstractmethod
    def get_product(self, product_id):
        """Product by id regardless of is_active, or None."""

    @abc.abstractmethod
    def get_product_by_slug(self, slug: str):
        """Product by slug regardless of is_active, or None."""

    # Discounts. Every finder returns only discounts applicable at `now`.

    @abc.abstractmethod
    def find_global_discounts(self, now: datetime) -> List:
        pass

    @abc.abstractmethod
    def find_product_discounts(self, product_id, vendor_id, now: datetime) -> List:
        pass

    @abc.abstractmethod
    def find_category_discounts(self, category_id, vendor_id, now: datetime) -> List:
        pass

    @abc.abstractmethod
    def find_brand_discounts(self, brand_id, vendor_id, now: datetime) -> List:
        pass

    @abc.abstractmethod
    def find_vendor_discounts(self, vendor_id, now: datetime) -> List:
        pass

    # Coupons

    @abc.abstractmethod
    def get_coupon_by_code(self, code: str):
        """Coupon with exactly this code, is_active set and status active, or None."""

    @abc.abstractmethod
    def count_coupon_usage(self, user_id: str, coupon_id) -> int:
        pass

    @abc.abstractmethod
    def record_coupon_usage(self, user_id: str, coupon_id, limit: Optional[int],
                            discount_amount: Decimal, order_id: Optional[str] = None):
        """
        Append a DiscountUsage row unless the user already reached `limit`.

        Count and insert must be atomic with respect to concurrent callers
        for the same coupon. Returns the new usage, or None when the limit
        was already reached.
        """

    # Delivery

    @abc.abstractmethod
    def find_delivery_zone(self, product_id, city: str, country: str):
        """Allowed ProductDeliveryZone for the exact destination, or None."""

    @abc.abstractmethod
    def find_delivery_lanes(self, product_id) -> List[DeliveryLane]:
        """All options of the product whose rate is active (any city)."""

    @abc.abstractmethod
    def find_pickup_locations(self, cities: Iterable[str]) -> List:
        """Active pickup locations whose city is one of `cities`."""

    # Reviews

    @abc.abstractmethod
    def find_approved_ratings(self, product_id=None, vendor_id=None) -> List[int]:
        pass

    @abc.abstractmethod
    def find_approved_ratings_by_product(self, product_ids) -> List[Tuple[object, int]]:
        """(product_id, rating) pairs of approved reviews for those products."""
