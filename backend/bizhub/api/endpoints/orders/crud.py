"""
Order CRUD
- list / statistics / company listing
- read, create, update, delete
"""

from typing import Any, Optional
from datetime import datetime
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from bizhub.core.config import settings
from bizhub.core.deps import get_db, get_tenant
from bizhub.core.enums import (
    OrderType, PaymentMethod, PaymentStatus, Priority, ReviewStatus, SimpleStatus
)
from bizhub.core.tenant import TenantContext
from bizhub.schemas.common import Envelope
from bizhub.schemas.order import (
    OrderCreate, OrderEnvelope, OrderListEnvelope, OrderStatisticsEnvelope, OrderUpdate
)
from bizhub.services.order_workflow import OrderWorkflow

from .core import build_list_envelope, build_order_response

router = APIRouter()


@router.get("", response_model=OrderListEnvelope)
async def list_orders(
    *,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    status: Optional[SimpleStatus] = Query(None),
    review_status: Optional[ReviewStatus] = Query(None),
    order_type: Optional[OrderType] = Query(None),
    priority: Optional[Priority] = Query(None),
    payment_status: Optional[PaymentStatus] = Query(None),
    payment_method: Optional[PaymentMethod] = Query(None),
    created_by: Optional[int] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    sort_by: str = Query("created_at", pattern="^(created_at|grand_total|order_no)$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$")) -> Any:
    """Orders of the caller's company; restricted roles only see their own"""
    orders, total = await OrderWorkflow(db, tenant).list_orders(
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        status=status,
        review_status=review_status.value if review_status else None,
        order_type=order_type.value if order_type else None,
        priority=priority.value if priority else None,
        payment_status=payment_status.value if payment_status else None,
        payment_method=payment_method.value if payment_method else None,
        created_by=created_by,
        start_date=start_date,
        end_date=end_date,
    )
    return build_list_envelope(orders, total, page, limit)


@router.get("/statistics", response_model=OrderStatisticsEnvelope)
async def order_statistics(
    *,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None)) -> Any:
    stats = await OrderWorkflow(db, tenant).statistics(start_date=start_date, end_date=end_date)
    return OrderStatisticsEnvelope(data=stats)


@router.get("/company/{company_id}", response_model=OrderListEnvelope)
async def list_company_orders(
    *,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant),
    company_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    status: Optional[SimpleStatus] = Query(None)) -> Any:
    orders, total = await OrderWorkflow(db, tenant).list_company_orders(
        company_id, page=page, limit=limit, status=status
    )
    return build_list_envelope(orders, total, page, limit)


@router.get("/{order_id}", response_model=OrderEnvelope)
async def get_order(
    *,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant),
    order_id: int) -> Any:
    order = await OrderWorkflow(db, tenant).get_order(order_id)
    return OrderEnvelope(data=build_order_response(order))


@router.post("", response_model=OrderEnvelope, status_code=201)
async def create_order(
    *,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant),
    order_in: OrderCreate) -> Any:
    """Create an order; stock is reserved for every line or for none"""
    order = await OrderWorkflow(db, tenant).create_order(order_in)
    return OrderEnvelope(data=build_order_response(order), message="Order created successfully")


@router.put("/{order_id}", response_model=OrderEnvelope)
async def update_order(
    *,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant),
    order_id: int,
    order_in: OrderUpdate) -> Any:
    order = await OrderWorkflow(db, tenant).update_order(order_id, order_in)
    return OrderEnvelope(data=build_order_response(order), message="Order updated successfully")


@router.delete("/{order_id}", response_model=Envelope)
async def delete_order(
    *,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant),
    order_id: int) -> Any:
    """Delete an order and give its stock back (owner/admin only)"""
    order = await OrderWorkflow(db, tenant).delete_order(order_id)
    return Envelope(message=f"Order {order.order_no} deleted successfully")
