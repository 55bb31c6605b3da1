"""
Order repository
- order number generation
- the eager-loaded base query used by every read
- list filters
"""

from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import Integer, cast, func, select
from sqlalchemy.orm import selectinload

from bizhub.core.enums import OrderType, SimpleStatus
from bizhub.models.order import Order
from bizhub.repositories.base import TenantRepository
from bizhub.services.order_status import review_states_for

ORDER_NO_PREFIX = {
    OrderType.INVOICE.value: "INV",
    OrderType.QUOTATION.value: "QUO",
    OrderType.PROFORMA.value: "PRO",
    OrderType.CREDIT.value: "CRD",
}

SORT_COLUMNS = {
    "created_at": Order.created_at,
    "grand_total": Order.grand_total,
    "order_no": Order.order_no,
}


class OrderRepository(TenantRepository[Order]):
    model = Order
    label = "Order"
    unique_fields = ("order_no",)

    def query(self, *options: Any):
        # items and flows are always needed to build a response
        return super().query(
            selectinload(Order.items),
            selectinload(Order.flows),
            *options,
        )

    async def generate_order_no(self, order_type: str) -> str:
        """Next order number of the day within this company"""
        prefix = ORDER_NO_PREFIX.get(order_type, "ORD")
        date_str = datetime.now().strftime("%Y%m%d")
        stem = f"{prefix}{date_str}"

        # numeric max of the sequence suffix
        suffix = cast(func.substr(Order.order_no, len(stem) + 1), Integer)
        result = await self.db.execute(
            select(func.max(suffix)).where(
                Order.company_id == self.tenant.company_id,
                Order.order_no.like(f"{stem}%"),
            )
        )
        seq = (result.scalar() or 0) + 1

        return f"{stem}{seq:03d}"

    def build_conditions(
        self,
        *,
        status: Optional[SimpleStatus] = None,
        review_status: Optional[str] = None,
        order_type: Optional[str] = None,
        priority: Optional[str] = None,
        payment_status: Optional[str] = None,
        payment_method: Optional[str] = None,
        created_by: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None) -> List[Any]:
        """Filter conditions; the company filter is added by query()/count()"""
        conditions = []
        if status:
            states = [s.value for s in review_states_for(status)]
            conditions.append(Order.review_status.in_(states))
        if review_status:
            conditions.append(Order.review_status == review_status)
        if order_type:
            conditions.append(Order.order_type == order_type)
        if priority:
            conditions.append(Order.priority == priority)
        if payment_status:
            conditions.append(Order.payment_status == payment_status)
        if payment_method:
            conditions.append(Order.payment_method == payment_method)
        if created_by is not None:
            conditions.append(Order.created_by == created_by)
        if start_date:
            conditions.append(Order.created_at >= start_date)
        if end_date:
            conditions.append(Order.created_at <= end_date)
        return conditions
