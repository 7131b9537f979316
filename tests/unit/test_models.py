"""
Unit tests for SQLAlchemy models.
"""

import pytest
import uuid
from decimal import Decimal
from marketplace.models import VendorProfile, Product, Coupon, DiscountUsage, Discount


class TestProductModel:
    """Tests for Product model."""
    
    def test_create_product(self, session):
        """Test creating a product."""
        suffix = str(uuid.uuid4())[:8]
        product = Product(
            name='Test Product',
            slug=f'test-product-{suffix}',
            price=Decimal('50.00'),
            is_active=True
        )
        session.add(product)
        session.commit()
        
        assert product.id is not None
        assert product.price == Decimal('50.00')
        assert product.category_id is None
    
    def test_product_slug_unique(self, session):
        """Test that product slug must be unique."""
        session.add(Product(name='One', slug='same-slug', price=Decimal('1'), is_active=True))
        session.commit()
        
        session.add(Product(name='Two', slug='same-slug', price=Decimal('2'), is_active=True))
        with pytest.raises(Exception):  # IntegrityError
            session.commit()
    
    def test_vendor_relationship(self, session):
        """Test product -> vendor relationship."""
        vendor = VendorProfile(business_name='Acme')
        session.add(vendor)
        session.flush()
        product = Product(name='Kettle', price=Decimal('10'), vendor_id=vendor.id, is_active=True)
        session.add(product)
        session.commit()
        
        assert product.vendor.business_name == 'Acme'


class TestDiscountModel:
    """Tests for Discount model."""
    
    def test_defaults(self, session):
        """Test column defaults on insert."""
        discount = Discount(name='Spring', value=Decimal('15'))
        session.add(discount)
        session.commit()
        
        assert discount.type == 'percentage'
        assert discount.status == 'active'
        assert discount.is_active is True
        assert discount.is_global is False
        assert discount.start_date is not None
        assert discount.to_dict()['value'] == 15


class TestCouponModel:
    """Tests for Coupon and DiscountUsage models."""
    
    def test_coupon_code_unique(self, session):
        """Test that coupon code must be unique."""
        session.add(Coupon(code='DUP', value=Decimal('5')))
        session.commit()
        
        session.add(Coupon(code='DUP', value=Decimal('10')))
        with pytest.raises(Exception):  # IntegrityError
            session.commit()
    
    def test_usage_rows_belong_to_coupon(self, session):
        """Test that usages hang off their coupon."""
        coupon = Coupon(code='USED', value=Decimal('5'))
        session.add(coupon)
        session.flush()
        session.add_all([
            DiscountUsage(user_id='u-1', coupon_id=coupon.id, discount_amount=Decimal('5')),
            DiscountUsage(user_id='u-2', coupon_id=coupon.id, discount_amount=Decimal('5')),
        ])
        session.commit()
        
        session.refresh(coupon)
        assert len(coupon.usages) == 2
        assert {u.user_id for u in coupon.usages} == {'u-1', 'u-2'}
