"""Coupon and DiscountUsage models."""
from sqlalchemy import Column, String, Boolean, Integer, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from marketplace.database import Base, BigIntegerId
from marketplace.models.discount import DiscountType, DiscountStatus
from marketplace.utils.money import money_json


class Coupon(Base):
    """Discount redeemed by code."""
    
    __tablename__ = 'coupons'
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    code = Column(String(64), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=True)
    type = Column(String(20), nullable=False, default=DiscountType.PERCENTAGE.value)
    value = Column(Numeric(10, 2), nullable=False, default=0)
    maximum_discount_amount = Column(Numeric(10, 2), nullable=True)
    minimum_order_amount = Column(Numeric(10, 2), nullable=True)
    usage_limit_per_user = Column(Integer, nullable=True)
    vendor_id = Column(BigIntegerId, ForeignKey('vendor_profiles.id'), nullable=True)
    status = Column(String(20), nullable=False, default=DiscountStatus.ACTIVE.value)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    
    # Relationships
    usages = relationship('DiscountUsage', back_populates='coupon', cascade='all, delete-orphan')
    
    def __repr__(self):
        return f"<Coupon(id={self.id}, code='{self.code}', type='{self.type}')>"
    
    def to_dict(self):
        return {
            'id': self.id,
            'code': self.code,
            'name': self.name,
            'type': self.type,
            'value': money_json(self.value),
            'maximum_discount_amount': money_json(self.maximum_discount_amount),
            'minimum_order_amount': money_json(self.minimum_order_amount),
            'usage_limit_per_user': self.usage_limit_per_user,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
        }


class DiscountUsage(Base):
    """One coupon redemption by one user. Append-only."""
    
    __tablename__ = 'discount_usage'
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    coupon_id = Column(BigIntegerId, ForeignKey('coupons.id', ondelete='CASCADE'), nullable=False, index=True)
    order_id = Column(String(64), nullable=True)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    used_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    
    coupon = relationship('Coupon', back_populates='usages')
    
    def __repr__(self):
        return f"<DiscountUsage(id={self.id}, user_id='{self.user_id}', coupon_id={self.coupon_id})>"
    
    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'coupon_id': self.coupon_id,
            'order_id': self.order_id,
            'discount_amount': money_json(self.discount_amount),
            'used_at': self.used_at.isoformat() if self.used_at else None,
        }
