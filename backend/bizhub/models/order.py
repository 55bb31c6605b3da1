"""
Order model

One purchase transaction of a company. review_status is the only stored
workflow state; the simple status other roles see is derived from it.
Pricing columns are always computed server-side.
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint, DECIMAL
from sqlalchemy.orm import relationship
from bizhub.db.base import Base
from bizhub.core.enums import (
    OrderType, PaymentMethod, PaymentStatus, Priority, ReviewStatus
)
from bizhub.services.order_status import to_simple_status


class Order(Base):
    """Order"""
    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint('company_id', 'order_no', name='uq_order_company_no'),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True, comment="Tenant")

    # {prefix}{YYYYMMDD}{seq}, e.g. INV20260101001
    order_no = Column(String(50), nullable=False, index=True, comment="Order number")
    order_type = Column(String(20), nullable=False, default=OrderType.INVOICE.value, comment="invoice/quotation/proforma/credit")

    # Customer reference: account id for registered customers, name snapshot always
    account_id = Column(Integer, ForeignKey("accounts.id"), index=True, comment="Customer account")
    customer_name = Column(String(200), nullable=False, comment="Customer name snapshot")
    contact_name = Column(String(100), comment="Contact person")
    contact_email = Column(String(200), comment="Contact email")
    contact_phone = Column(String(50), comment="Contact phone")

    # Payment
    payment_method = Column(String(20), nullable=False, default=PaymentMethod.CASH.value, comment="cash/card/transfer/credit")
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value, comment="pending/paid")

    # Pricing summary
    subtotal = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Sum of line subtotals")
    delivery_cost = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Delivery cost")
    total_vat = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Total VAT")
    grand_total = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="subtotal + delivery + VAT")
    currency = Column(String(10), nullable=False, default="BD", comment="Currency")

    review_status = Column(
        String(20), nullable=False, default=ReviewStatus.PENDING_REVIEW.value, index=True, comment="Workflow state"
    )
    priority = Column(String(20), nullable=False, default=Priority.NORMAL.value, comment="normal/urgent/rush/emergency")
    notes = Column(Text, comment="Notes")

    # Audit fields (actor ids from the auth gateway)
    created_by = Column(Integer, nullable=False, index=True, comment="Creator")
    updated_by = Column(Integer, comment="Last updater")
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.id")
    flows = relationship("OrderFlow", back_populates="order", cascade="all, delete-orphan", order_by="OrderFlow.id")
    account = relationship("Account", foreign_keys=[account_id])

    def __repr__(self):
        return f"<Order {self.order_no} ({self.review_status})>"

    @property
    def status(self) -> str:
        """Simple status derived from review_status"""
        return to_simple_status(self.review_status).value

    @property
    def is_credit(self) -> bool:
        return self.payment_method == PaymentMethod.CREDIT.value

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID.value


class OrderItem(Base):
    """Order line item - product fields are snapshots taken at order time"""
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    product_name = Column(String(200), nullable=False, comment="Product name snapshot")
    sku = Column(String(50), comment="SKU snapshot")
    brand = Column(String(100), comment="Brand snapshot")
    category = Column(String(100), comment="Category snapshot")

    quantity = Column(Integer, nullable=False, comment="Quantity")
    reserved_quantity = Column(Integer, comment="Units actually taken from stock (below quantity when clamped)")
    unit_price = Column(DECIMAL(12, 2), nullable=False, comment="Unit price")
    vat_rate = Column(DECIMAL(5, 2), nullable=False, default=Decimal("0.00"), comment="VAT rate (%)")
    vat_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="VAT amount")
    line_subtotal = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="unit_price * quantity")
    line_total = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="line_subtotal + vat_amount")

    created_at = Column(DateTime, default=datetime.utcnow)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    def __repr__(self):
        return f"<OrderItem {self.product_name} x{self.quantity}>"
