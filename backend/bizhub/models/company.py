"""
Company model - the tenant root
Every product, account, order and journal row belongs to exactly one company
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, DECIMAL
from sqlalchemy.orm import relationship
from bizhub.db.base import Base
from bizhub.core.enums import CompanyPaymentStatus


def derive_payment_status(
    credit_limit: Decimal,
    current_balance: Decimal,
    warning_ratio: Decimal = Decimal("0.8")) -> str:
    """over_limit above the limit, warning from warning_ratio of it, else active"""
    limit = credit_limit or Decimal("0")
    balance = current_balance or Decimal("0")
    if balance > limit:
        return CompanyPaymentStatus.OVER_LIMIT.value
    if limit > 0 and balance / limit >= warning_ratio:
        return CompanyPaymentStatus.WARNING.value
    return CompanyPaymentStatus.ACTIVE.value


class Company(Base):
    """Company (tenant)"""
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True, comment="Company name")
    email = Column(String(200), unique=True, comment="Company email")
    is_active = Column(Boolean, default=True, nullable=False, comment="Active flag")

    # Aggregate payment info
    credit_limit = Column(DECIMAL(12, 2), default=Decimal("5000.00"), comment="Credit limit")
    current_balance = Column(DECIMAL(12, 2), default=Decimal("0.00"), comment="Current balance")
    # cash / credit_30 / credit_60 / credit_90
    payment_terms = Column(String(20), default="cash", comment="Payment terms")
    payment_status = Column(
        String(20), default=CompanyPaymentStatus.ACTIVE.value, comment="active/warning/over_limit"
    )

    notes = Column(Text, comment="Notes")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    products = relationship("Product", back_populates="company")
    accounts = relationship("Account", back_populates="company")

    def __repr__(self):
        return f"<Company {self.id}: {self.name}>"

    @property
    def credit_utilization(self) -> Decimal:
        """Balance as a percentage of the credit limit"""
        if not self.credit_limit:
            return Decimal("0")
        return (Decimal(self.current_balance or 0) / Decimal(self.credit_limit) * 100).quantize(Decimal("0.01"))
