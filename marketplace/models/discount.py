"""Discount model and its vendor scope join tables."""
from sqlalchemy import Column, String, Boolean, Numeric, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from marketplace.database import Base, BigIntegerId
from marketplace.utils.money import money_json
import enum


class DiscountType(str, enum.Enum):
    """How a discount's value is interpreted."""
    PERCENTAGE = 'percentage'
    FIXED_AMOUNT = 'fixed_amount'
    FREE_SHIPPING = 'free_shipping'


class DiscountStatus(str, enum.Enum):
    """Lifecycle status. Only ACTIVE discounts (and coupons) can apply."""
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    EXPIRED = 'expired'
    DRAFT = 'draft'


class Discount(Base):
    """Automatic promotional discount."""
    
    __tablename__ = 'discounts'
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    type = Column(String(20), nullable=False, default=DiscountType.PERCENTAGE.value)
    value = Column(Numeric(10, 2), nullable=False, default=0)
    maximum_discount_amount = Column(Numeric(10, 2), nullable=True)
    minimum_order_amount = Column(Numeric(10, 2), nullable=True)
    is_global = Column(Boolean, nullable=False, default=False)
    vendor_id = Column(BigIntegerId, ForeignKey('vendor_profiles.id'), nullable=True)
    status = Column(String(20), nullable=False, default=DiscountStatus.ACTIVE.value)
    is_active = Column(Boolean, nullable=False, default=True)
    start_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    end_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    
    # Relationships
    vendor = relationship('VendorProfile')
    
    def __repr__(self):
        return f"<Discount(id={self.id}, name='{self.name}', type='{self.type}', value={self.value})>"
    
    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'value': money_json(self.value),
            'maximum_discount_amount': money_json(self.maximum_discount_amount),
            'minimum_order_amount': money_json(self.minimum_order_amount),
            'is_global': self.is_global,
            'vendor_id': self.vendor_id,
            'status': self.status,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
        }


class VendorProductDiscount(Base):
    """Narrows a discount to one product of one vendor."""
    
    __tablename__ = 'vendor_product_discounts'
    __table_args__ = (UniqueConstraint('discount_id', 'product_id', name='uq_vendor_product_discount'),)
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    discount_id = Column(BigIntegerId, ForeignKey('discounts.id', ondelete='CASCADE'), nullable=False, index=True)
    product_id = Column(BigIntegerId, ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True)
    vendor_id = Column(BigIntegerId, ForeignKey('vendor_profiles.id'), nullable=False)
    
    discount = relationship('Discount')


class VendorCategoryDiscount(Base):
    """Narrows a discount to one category of one vendor."""
    
    __tablename__ = 'vendor_category_discounts'
    __table_args__ = (UniqueConstraint('discount_id', 'category_id', 'vendor_id', name='uq_vendor_category_discount'),)
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    discount_id = Column(BigIntegerId, ForeignKey('discounts.id', ondelete='CASCADE'), nullable=False, index=True)
    category_id = Column(BigIntegerId, ForeignKey('categories.id', ondelete='CASCADE'), nullable=False, index=True)
    vendor_id = Column(BigIntegerId, ForeignKey('vendor_profiles.id'), nullable=False)
    
    discount = relationship('Discount')


class VendorBrandDiscount(Base):
    """Narrows a discount to one brand of one vendor."""
    
    __tablename__ = 'vendor_brand_discounts'
    __table_args__ = (UniqueConstraint('discount_id', 'brand_id', 'vendor_id', name='uq_vendor_brand_discount'),)
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    discount_id = Column(BigIntegerId, ForeignKey('discounts.id', ondelete='CASCADE'), nullable=False, index=True)
    brand_id = Column(BigIntegerId, ForeignKey('brands.id', ondelete='CASCADE'), nullable=False, index=True)
    vendor_id = Column(BigIntegerId, ForeignKey('vendor_profiles.id'), nullable=False)
    
    discount = relationship('Discount')
