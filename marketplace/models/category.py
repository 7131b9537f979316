"""Category and brand models."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from marketplace.database import Base, BigIntegerId


class Category(Base):
    """Product Category."""
    
    __tablename__ = 'categories'
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    
    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"


class Brand(Base):
    """Product Brand."""
    
    __tablename__ = 'brands'
    
    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    
    def __repr__(self):
        return f"<Brand(id={self.id}, name='{self.name}')>"
