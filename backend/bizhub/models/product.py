"""
Product model
Stock columns and status are written only by ProductLedger
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint, DECIMAL
from sqlalchemy.orm import relationship
from bizhub.db.base import Base
from bizhub.core.enums import ProductStatus


class Product(Base):
    """Product

    SKU is unique within a company, not globally
    """
    __tablename__ = "products"
    __table_args__ = (
        UniqueConstraint('company_id', 'sku', name='uq_product_company_sku'),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True, comment="Tenant")

    name = Column(String(200), nullable=False, index=True, comment="Product name")
    sku = Column(String(50), nullable=False, comment="SKU (upper case)")
    # display names; brand/category management lives outside the order core
    brand = Column(String(100), comment="Brand name")
    category = Column(String(100), comment="Category name")
    description = Column(Text, comment="Description")

    price = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Selling price")
    cost = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Cost price")
    vat_rate = Column(DECIMAL(5, 2), nullable=False, default=Decimal("10.00"), comment="VAT rate (%)")

    stock_current = Column(Integer, nullable=False, default=0, comment="Units on hand")
    stock_minimum = Column(Integer, nullable=False, default=5, comment="Low stock threshold")
    stock_maximum = Column(Integer, nullable=False, default=1000, comment="Maximum stock")

    # derived from stock_current, see ProductLedger
    status = Column(String(20), nullable=False, default=ProductStatus.ACTIVE.value, index=True, comment="Status")
    is_active = Column(Boolean, default=True, comment="Active flag")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    company = relationship("Company", back_populates="products")

    def __repr__(self):
        return f"<Product {self.sku}: {self.name} stock={self.stock_current}>"

    @property
    def stock_status(self) -> str:
        """out_of_stock / low_stock / in_stock"""
        current = self.stock_current or 0
        if current == 0:
            return "out_of_stock"
        if current <= (self.stock_minimum or 0):
            return "low_stock"
        return "in_stock"
