"""
Order status actions
"""

from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bizhub.core.deps import get_db, get_tenant
from bizhub.core.tenant import TenantContext
from bizhub.schemas.order import OrderEnvelope, OrderStatusChange
from bizhub.services.order_workflow import OrderWorkflow

from .core import build_order_response

router = APIRouter()


@router.patch("/{order_id}/status", response_model=OrderEnvelope)
async def change_order_status(
    *,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant),
    order_id: int,
    status_in: OrderStatusChange) -> Any:
    """
    Change the simple status of an order

    - reviewers may make any legal move
    - other roles may only cancel an order still pending review
    """
    order = await OrderWorkflow(db, tenant).change_status(order_id, status_in)
    return OrderEnvelope(
        data=build_order_response(order),
        message=f"Order status changed to {order.status}",
    )
