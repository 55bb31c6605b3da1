"""
Company sales journal - append-only record of sales per company

Rows are never updated or deleted. Corrections (cancelled, deleted or
re-itemised orders) are appended as reversal rows.
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, DECIMAL
from bizhub.db.base import Base
from bizhub.core.enums import JournalEntryType


class SalesJournalEntry(Base):
    """Sales journal row"""
    __tablename__ = "sales_journal_entries"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    # no FK: journal rows outlive deleted orders
    order_id = Column(Integer, nullable=False, index=True, comment="Order id")
    product_id = Column(Integer, nullable=False, index=True, comment="Product id")

    product_name = Column(String(200), comment="Product name")
    brand = Column(String(100), comment="Brand")
    category = Column(String(100), comment="Category")

    quantity = Column(Integer, nullable=False, comment="Quantity")
    unit_price = Column(DECIMAL(12, 2), nullable=False, comment="Unit price")
    total_price = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Line total incl. VAT")
    payment_type = Column(String(20), nullable=False, comment="Payment method")
    entry_type = Column(String(20), nullable=False, default=JournalEntryType.SALE.value, comment="sale/reversal")

    recorded_at = Column(DateTime, default=datetime.utcnow, index=True, comment="Recorded at")

    def __repr__(self):
        return f"<SalesJournalEntry {self.entry_type} order={self.order_id} {self.total_price}>"

    @property
    def signed_total(self) -> Decimal:
        """Total with reversals negative"""
        total = self.total_price or Decimal("0")
        return -total if self.entry_type == JournalEntryType.REVERSAL.value else total
