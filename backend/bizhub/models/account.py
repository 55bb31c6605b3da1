"""
Customer account model
current_balance is the outstanding credit owed and is written only by
AccountCreditLedger
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint, DECIMAL
from sqlalchemy.orm import relationship
from bizhub.db.base import Base


class Account(Base):
    """Customer account"""
    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint('company_id', 'name', name='uq_account_company_name'),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True, comment="Tenant")

    name = Column(String(200), nullable=False, comment="Account name")
    phone = Column(String(50), comment="Phone")
    email = Column(String(200), comment="Email")

    credit_limit = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Credit limit")
    current_balance = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Outstanding credit")

    is_active = Column(Boolean, default=True, comment="Active flag")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    company = relationship("Company", back_populates="accounts")

    def __repr__(self):
        return f"<Account {self.name} balance={self.current_balance}>"

    @property
    def available_credit(self) -> Decimal:
        """Credit still available to the customer"""
        remaining = (self.credit_limit or Decimal("0")) - (self.current_balance or Decimal("0"))
        return max(remaining, Decimal("0"))
