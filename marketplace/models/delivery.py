"""Delivery models: methods, priced lanes, per-product options and zones."""
from sqlalchemy import Column, String, Boolean, Integer, Numeric, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from marketplace.database import Base, BigIntegerId


class DeliveryMethod(Base):
    """Delivery method (Standard, Express, ...)."""
    
    __tablename__ = 'delivery_methods'
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    
    def __repr__(self):
        return f"<DeliveryMethod(id={self.id}, name='{self.name}')>"


class DeliveryRate(Base):
    """Priced lane between a pickup city and a delivery city for one method."""
    
    __tablename__ = 'delivery_rates'
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    pickup_city = Column(String(120), nullable=False)
    delivery_city = Column(String(120), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    estimated_min_days = Column(Integer, nullable=False, default=0)
    estimated_max_days = Column(Integer, nullable=False, default=0)
    delivery_method_id = Column(BigIntegerId, ForeignKey('delivery_methods.id'), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    
    delivery_method = relationship('DeliveryMethod')
    
    def __repr__(self):
        return f"<DeliveryRate(id={self.id}, {self.pickup_city} -> {self.delivery_city}, price={self.price})>"


class ProductDeliveryOption(Base):
    """Links a product to a delivery lane, optionally flagged as free."""
    
    __tablename__ = 'product_delivery_options'
    __table_args__ = (UniqueConstraint('product_id', 'delivery_rate_id', name='uq_product_delivery_option'),)
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    product_id = Column(BigIntegerId, ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True)
    delivery_rate_id = Column(BigIntegerId, ForeignKey('delivery_rates.id', ondelete='CASCADE'), nullable=False)
    is_free_delivery = Column(Boolean, nullable=False, default=False)
    
    product = relationship('Product', back_populates='delivery_options')
    delivery_rate = relationship('DeliveryRate')


class ProductDeliveryZone(Base):
    """Explicit allow/deny of a destination for a product."""
    
    __tablename__ = 'product_delivery_zones'
    __table_args__ = (UniqueConstraint('product_id', 'city', 'country', name='uq_product_delivery_zone'),)
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    product_id = Column(BigIntegerId, ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True)
    city = Column(String(120), nullable=False)
    country = Column(String(120), nullable=False)
    is_allowed = Column(Boolean, nullable=False, default=True)
    
    product = relationship('Product', back_populates='delivery_zones')


class PickupLocation(Base):
    """Origin a parcel ships from."""
    
    __tablename__ = 'pickup_locations'
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    city = Column(String(120), nullable=False, index=True)
    country = Column(String(120), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    
    def __repr__(self):
        return f"<PickupLocation(id={self.id}, name='{self.name}', city='{self.city}')>"
