"""Models package - exports all SQLAlchemy models."""
# Catalog
from marketplace.models.vendor_profile import VendorProfile
from marketplace.models.category import Category, Brand
from marketplace.models.product import Product

# Promotions
from marketplace.models.discount import (
    Discount, DiscountType, DiscountStatus,
    VendorProductDiscount, VendorCategoryDiscount, VendorBrandDiscount
)
from marketplace.models.coupon import Coupon, DiscountUsage

# Delivery
from marketplace.models.delivery import (
    DeliveryMethod, DeliveryRate, ProductDeliveryOption, ProductDeliveryZone, PickupLocation
)

# Reviews
from marketplace.models.review import Review

__all__ = [
    # Catalog
    'VendorProfile', 'Category', 'Brand', 'Product',
    # Promotions
    'Discount', 'DiscountType', 'DiscountStatus',
    'VendorProductDiscount', 'VendorCategoryDiscount', 'VendorBrandDiscount',
    'Coupon', 'DiscountUsage',
    # Delivery
    'DeliveryMethod', 'DeliveryRate', 'ProductDeliveryOption', 'ProductDeliveryZone', 'PickupLocation',
    # Reviews
    'Review',
]
