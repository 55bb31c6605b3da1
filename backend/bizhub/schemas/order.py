"""Order schemas"""
from typing import Dict, Optional, List
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from decimal import Decimal

from bizhub.core.enums import (
    OrderType, PaymentMethod, PaymentStatus, Priority, ReviewStatus, SimpleStatus
)
from bizhub.schemas.common import Envelope, Pagination


# ===== Items =====
class OrderItemBase(BaseModel):
    product_id: int = Field(..., description="Product id")
    quantity: int = Field(..., ge=1, description="Quantity")
    # snapshot fields, copied from the product when omitted
    product_name: Optional[str] = Field(None, max_length=200)
    sku: Optional[str] = Field(None, max_length=50)
    brand: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = Field(None, max_length=100)


class OrderItemCreate(OrderItemBase):
    """Item of a create/update request; price and VAT default to the product's"""
    unit_price: Optional[Decimal] = Field(None, ge=0, description="Unit price")
    vat_rate: Optional[Decimal] = Field(None, ge=0, le=100, description="VAT rate (%)")


class OrderItemResponse(OrderItemBase):
    id: int
    order_id: int
    reserved_quantity: Optional[int] = None
    unit_price: float
    vat_rate: float
    vat_amount: float
    line_subtotal: float
    line_total: float
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ===== Flows =====
class OrderFlowResponse(BaseModel):
    id: int
    order_id: int
    flow_type: str
    type_display: str = ""
    from_status: Optional[str] = None
    to_status: Optional[str] = None
    description: Optional[str] = None
    meta_data: Optional[dict] = None
    notes: Optional[str] = None
    operator_id: int
    operated_at: datetime

    class Config:
        from_attributes = True


# ===== Orders =====
class OrderCreate(BaseModel):
    # accepted only when it names the caller's own company
    company_id: Optional[int] = Field(None, description="Company id")
    order_type: OrderType = Field(default=OrderType.INVOICE, description="Order type")
    account_id: Optional[int] = Field(None, description="Customer account id")
    customer_name: Optional[str] = Field(None, max_length=200, description="Customer name")
    contact_name: Optional[str] = Field(None, max_length=100)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=50)
    items: List[OrderItemCreate] = Field(..., min_length=1, description="Line items")
    payment_method: PaymentMethod = Field(default=PaymentMethod.CASH)
    priority: Priority = Field(default=Priority.NORMAL)
    notes: Optional[str] = None


class OrderUpdate(BaseModel):
    """Partial update; items can only be replaced while the order is pending review and unpaid"""
    company_id: Optional[int] = None
    contact_name: Optional[str] = Field(None, max_length=100)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=50)
    priority: Optional[Priority] = None
    notes: Optional[str] = None
    review_status: Optional[ReviewStatus] = None
    payment_status: Optional[PaymentStatus] = None
    items: Optional[List[OrderItemCreate]] = Field(None, min_length=1)


class OrderStatusChange(BaseModel):
    status: SimpleStatus = Field(..., description="pending/processing/confirmed/cancelled")
    notes: Optional[str] = None


class OrderResponse(BaseModel):
    id: int
    company_id: int
    order_no: str
    order_type: str
    account_id: Optional[int] = None
    customer_name: str
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    payment_method: str
    payment_status: str
    subtotal: float = 0
    delivery_cost: float = 0
    total_vat: float = 0
    grand_total: float = 0
    currency: str
    status: str
    review_status: str
    priority: str
    notes: Optional[str] = None
    created_by: int
    updated_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemResponse] = []
    flows: List[OrderFlowResponse] = []

    class Config:
        from_attributes = True


class OrderStatistics(BaseModel):
    total_orders: int = 0
    by_status: Dict[str, int] = {}
    by_payment_method: Dict[str, int] = {}
    total_revenue: float = 0
    average_order_value: float = 0
    outstanding_credit: float = 0


# ===== Envelopes =====
class OrderEnvelope(Envelope):
    data: OrderResponse


class OrderListEnvelope(Envelope):
    data: List[OrderResponse]
    count: int
    total: int
    pagination: Optional[Pagination] = None


class OrderStatisticsEnvelope(Envelope):
    data: OrderStatistics
