"""Review model."""
from sqlalchemy import Column, Boolean, Integer, Text, String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from marketplace.database import Base, BigIntegerId


class Review(Base):
    """Customer review of a product (and, through it, its vendor)."""
    
    __tablename__ = 'reviews'
    __table_args__ = (
        CheckConstraint('rating BETWEEN 1 AND 5', name='ck_reviews_rating_range'),
    )
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    product_id = Column(BigIntegerId, ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True)
    vendor_id = Column(BigIntegerId, ForeignKey('vendor_profiles.id'), nullable=True, index=True)
    user_id = Column(String(64), nullable=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    # Only moderated reviews count toward ratings
    is_approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    
    product = relationship('Product')
    
    def __repr__(self):
        return f"<Review(id={self.id}, product_id={self.product_id}, rating={self.rating})>"
