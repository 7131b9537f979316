"""
Integration tests for SqlAlchemyStore against the test database.
"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from marketplace.models import (
    VendorProfile, Category, Brand, Product, Discount,
    VendorProductDiscount, VendorCategoryDiscount, VendorBrandDiscount,
    Coupon, DeliveryMethod, DeliveryRate, ProductDeliveryOption, ProductDeliveryZone,
    PickupLocation, Review
)
from marketplace.services.discount_service import list_applicable_discounts, calculate_best_discount
from marketplace.services.coupon_service import validate_coupon, redeem_coupon
from marketplace.services.delivery_service import resolve_delivery_options
from marketplace.services.review_service import get_batch_product_ratings, get_vendor_rating

NOW = datetime(2024, 6, 1, 12, 0, 0)
YESTERDAY = NOW - timedelta(days=1)


@pytest.fixture
def vendor(session):
    vendor = VendorProfile(business_name='Acme Goods', status='active', commission_rate=Decimal('12.00'))
    session.add(vendor)
    session.commit()
    return vendor


@pytest.fixture
def other_vendor(session):
    vendor = VendorProfile(business_name='Other Goods', status='active', commission_rate=Decimal('10.00'))
    session.add(vendor)
    session.commit()
    return vendor


@pytest.fixture
def product(session, vendor):
    category = Category(name='Kitchen')
    brand = Brand(name='Acme')
    session.add_all([category, brand])
    session.flush()
    product = Product(
        name='Steel Kettle',
        slug='steel-kettle',
        price=Decimal('100.00'),
        category_id=category.id,
        brand_id=brand.id,
        vendor_id=vendor.id,
        is_active=True
    )
    session.add(product)
    session.commit()
    return product


def _discount(session, **kwargs):
    values = dict(name='Promo', type='percentage', value=Decimal('10'), is_global=False,
                  status='active', is_active=True, start_date=YESTERDAY, end_date=None)
    values.update(kwargs)
    discount = Discount(**values)
    session.add(discount)
    session.flush()
    return discount


class TestDiscountQueries:
    """Scope queries and the applicability filter in SQL."""

    def test_all_scopes_are_found_once(self, session, sql_store, product, vendor):
        global_d = _discount(session, name='Global', is_global=True, vendor_id=vendor.id)
        product_d = _discount(session, name='Product')
        session.add(VendorProductDiscount(discount_id=product_d.id, product_id=product.id, vendor_id=vendor.id))
        category_d = _discount(session, name='Category')
        session.add(VendorCategoryDiscount(discount_id=category_d.id, category_id=product.category_id, vendor_id=vendor.id))
        brand_d = _discount(session, name='Brand')
        session.add(VendorBrandDiscount(discount_id=brand_d.id, brand_id=product.brand_id, vendor_id=vendor.id))
        session.commit()

        discounts = list_applicable_discounts(sql_store, product, NOW)

        assert [d.name for d in discounts] == ['Global', 'Product', 'Category', 'Brand']

    def test_expired_inactive_and_future_are_filtered(self, session, sql_store, product):
        _discount(session, name='Expired', is_global=True, end_date=NOW - timedelta(hours=1))
        _discount(session, name='Paused', is_global=True, is_active=False)
        _discount(session, name='Draft', is_global=True, status='draft')
        _discount(session, name='Future', is_global=True, start_date=NOW + timedelta(days=1))
        _discount(session, name='Live', is_global=True, end_date=NOW + timedelta(days=1))
        session.commit()

        discounts = list_applicable_discounts(sql_store, product, NOW)

        assert [d.name for d in discounts] == ['Live']

    def test_join_row_for_another_vendor_is_ignored(self, session, sql_store, product, other_vendor):
        leaked = _discount(session, name='Leaked')
        session.add(VendorProductDiscount(discount_id=leaked.id, product_id=product.id, vendor_id=other_vendor.id))
        session.commit()

        assert list_applicable_discounts(sql_store, product, NOW) == []

    def test_best_discount_from_database_rows(self, session, sql_store, product, vendor):
        _discount(session, name='Capped', is_global=True, type='percentage',
                  value=Decimal('10'), maximum_discount_amount=Decimal('5'))
        _discount(session, name='Eight off', vendor_id=vendor.id, type='fixed_amount', value=Decimal('8'))
        session.commit()

        best = calculate_best_discount(product.price, list_applicable_discounts(sql_store, product, NOW))

        assert best.best_discount.name == 'Eight off'
        assert best.final_price == Decimal('92')


class TestCouponUsage:
    """Redemption counting through discount_usage rows."""

    def test_usage_limit_per_user(self, session, sql_store):
        session.add(Coupon(code='WELCOME', type='fixed_amount', value=Decimal('5'),
                           usage_limit_per_user=1, is_active=True, status='active'))
        session.commit()

        assert validate_coupon(sql_store, 'WELCOME', 'user-1', Decimal('20'), NOW).valid is True

        result, usage = redeem_coupon(sql_store, 'WELCOME', 'user-1', Decimal('20'), order_id='A-1', now=NOW)
        assert usage is not None
        assert usage.discount_amount == Decimal('5')

        second = validate_coupon(sql_store, 'WELCOME', 'user-1', Decimal('20'), NOW)
        assert second.valid is False
        assert second.reason == 'usage_limit'

    def test_draft_coupon_is_not_found(self, session, sql_store):
        session.add(Coupon(code='LATER', type='percentage', value=Decimal('10'),
                           is_active=True, status='draft'))
        session.commit()

        assert sql_store.get_coupon_by_code('LATER') is None
        assert validate_coupon(sql_store, 'LATER', 'user-1', Decimal('20'), NOW).reason == 'not_found'

    def test_record_refuses_past_limit(self, session, sql_store):
        coupon = Coupon(code='ONCE', type='percentage', value=Decimal('10'),
                        usage_limit_per_user=1, is_active=True, status='active')
        session.add(coupon)
        session.commit()
        coupon_id = coupon.id

        assert sql_store.record_coupon_usage('user-9', coupon_id, 1, Decimal('1')) is not None
        assert sql_store.record_coupon_usage('user-9', coupon_id, 1, Decimal('1')) is None
        assert sql_store.count_coupon_usage('user-9', coupon_id) == 1


class TestDeliveryQueries:
    """Zone, lanes and pickup locations from the database."""

    def test_resolution_from_database_rows(self, session, sql_store, product):
        standard = DeliveryMethod(name='Standard')
        express = DeliveryMethod(name='Express')
        session.add_all([standard, express])
        session.flush()
        rates = [
            DeliveryRate(pickup_city='Dallas', delivery_city='Austin', price=Decimal('20'),
                         estimated_min_days=3, estimated_max_days=5, delivery_method_id=standard.id, is_active=True),
            DeliveryRate(pickup_city='Houston', delivery_city='Austin', price=Decimal('15'),
                         estimated_min_days=5, estimated_max_days=7, delivery_method_id=standard.id, is_active=True),
            DeliveryRate(pickup_city='Dallas', delivery_city='Austin', price=Decimal('30'),
                         estimated_min_days=2, estimated_max_days=3, delivery_method_id=express.id, is_active=True),
            DeliveryRate(pickup_city='Dallas', delivery_city='Austin', price=Decimal('1'),
                         estimated_min_days=1, estimated_max_days=1, delivery_method_id=express.id, is_active=False),
        ]
        session.add_all(rates)
        session.flush()
        for rate in rates:
            session.add(ProductDeliveryOption(product_id=product.id, delivery_rate_id=rate.id,
                                              is_free_delivery=False))
        session.add_all([
            ProductDeliveryZone(product_id=product.id, city='Austin', country='USA', is_allowed=True),
            PickupLocation(name='Dallas Hub', city='Dallas', country='USA', is_active=True),
            PickupLocation(name='Houston Hub', city='Houston', country='USA', is_active=True),
        ])
        session.commit()

        resolution = resolve_delivery_options(sql_store, 'steel-kettle', 'Austin', 'USA')

        assert resolution.summary.total_options == 3
        assert resolution.summary.cheapest_price == Decimal('15')
        assert resolution.summary.fastest_days == 2
        assert {o.delivery_method_name for o in resolution.options} == {'Standard', 'Express'}

    def test_blocked_zone(self, session, sql_store, product):
        session.add(ProductDeliveryZone(product_id=product.id, city='Austin', country='USA', is_allowed=False))
        session.commit()

        resolution = resolve_delivery_options(sql_store, product.id, 'Austin', 'USA')

        assert resolution.summary.can_deliver is False
        assert resolution.options == []


class TestRatingQueries:

    def test_batch_ratings(self, session, sql_store, product, vendor):
        other = Product(name='Teapot', slug='teapot', price=Decimal('30'), vendor_id=vendor.id, is_active=True)
        session.add(other)
        session.flush()
        session.add_all([
            Review(product_id=product.id, rating=5, is_approved=True),
            Review(product_id=product.id, rating=3, is_approved=True),
            Review(product_id=product.id, rating=1, is_approved=False),
        ])
        session.commit()

        stats = get_batch_product_ratings(sql_store, [product.id, other.id])

        assert stats[product.id].to_dict() == {'averageRating': 4.0, 'totalReviews': 2}
        assert stats[other.id].to_dict() == {'averageRating': 0, 'totalReviews': 0}

    def test_vendor_rating_follows_product_owner(self, session, sql_store, product, vendor, other_vendor):
        session.add_all([
            Review(product_id=product.id, vendor_id=other_vendor.id, rating=4, is_approved=True),
            Review(product_id=product.id, rating=2, is_approved=True),
        ])
        session.commit()

        assert get_vendor_rating(sql_store, vendor.id).to_dict() == {'averageRating': 3.0, 'totalReviews': 2}
        assert get_vendor_rating(sql_store, other_vendor.id).total_reviews == 0
