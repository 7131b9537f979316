"""Product model."""
from sqlalchemy import Column, String, Boolean, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from marketplace.database import Base, BigIntegerId


class Product(Base):
    """Product model."""
    
    __tablename__ = 'products'
    __table_args__ = (
        CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
    )
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    slug = Column(String(255), nullable=True, unique=True, index=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    category_id = Column(BigIntegerId, ForeignKey('categories.id'), nullable=True)
    brand_id = Column(BigIntegerId, ForeignKey('brands.id'), nullable=True)
    vendor_id = Column(BigIntegerId, ForeignKey('vendor_profiles.id'), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
    
    # Relationships
    category = relationship('Category', foreign_keys=[category_id])
    brand = relationship('Brand', foreign_keys=[brand_id])
    vendor = relationship('VendorProfile', foreign_keys=[vendor_id])
    delivery_options = relationship('ProductDeliveryOption', back_populates='product', cascade="all, delete-orphan")
    delivery_zones = relationship('ProductDeliveryZone', back_populates='product', cascade="all, delete-orphan")
    
    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', slug='{self.slug}')>"
