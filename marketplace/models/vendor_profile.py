"""Vendor profile model."""
from sqlalchemy import Column, String, Numeric, DateTime
from sqlalchemy.sql import func
from marketplace.database import Base, BigIntegerId


class VendorProfile(Base):
    """Seller account that owns products, discounts and reviews."""
    
    __tablename__ = 'vendor_profiles'
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    business_name = Column(String(200), nullable=False)
    status = Column(String(20), nullable=False, default='active', server_default='active')
    commission_rate = Column(Numeric(5, 2), nullable=False, default=0, server_default='0')
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    
    def __repr__(self):
        return f"<VendorProfile(id={self.id}, business_name='{self.business_name}')>"
