"""
Order API core
- response building
- list envelope / pagination
"""

import math
from typing import List

from bizhub.models.order import Order
from bizhub.schemas.common import Pagination
from bizhub.schemas.order import (
    OrderFlowResponse, OrderItemResponse, OrderListEnvelope, OrderResponse
)


def build_order_response(order: Order) -> OrderResponse:
    """Order row -> response; money as floats"""
    resp = OrderResponse(
        id=order.id,
        company_id=order.company_id,
        order_no=order.order_no,
        order_type=order.order_type,
        account_id=order.account_id,
        customer_name=order.customer_name,
        contact_name=order.contact_name,
        contact_email=order.contact_email,
        contact_phone=order.contact_phone,
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        subtotal=float(order.subtotal or 0),
        delivery_cost=float(order.delivery_cost or 0),
        total_vat=float(order.total_vat or 0),
        grand_total=float(order.grand_total or 0),
        currency=order.currency,
        status=order.status,
        review_status=order.review_status,
        priority=order.priority,
        notes=order.notes,
        created_by=order.created_by,
        updated_by=order.updated_by,
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=[],
        flows=[],
    )

    for item in order.items:
        resp.items.append(OrderItemResponse(
            id=item.id,
            order_id=item.order_id,
            product_id=item.product_id,
            product_name=item.product_name,
            sku=item.sku,
            brand=item.brand,
            category=item.category,
            quantity=item.quantity,
            reserved_quantity=item.reserved_quantity,
            unit_price=float(item.unit_price),
            vat_rate=float(item.vat_rate or 0),
            vat_amount=float(item.vat_amount or 0),
            line_subtotal=float(item.line_subtotal or 0),
            line_total=float(item.line_total or 0),
            created_at=item.created_at,
        ))

    for flow in order.flows:
        resp.flows.append(OrderFlowResponse(
            id=flow.id,
            order_id=flow.order_id,
            flow_type=flow.flow_type,
            type_display=flow.type_display,
            from_status=flow.from_status,
            to_status=flow.to_status,
            description=flow.description,
            meta_data=flow.meta_data,
            notes=flow.notes,
            operator_id=flow.operator_id,
            operated_at=flow.operated_at,
        ))

    return resp


def build_list_envelope(orders: List[Order], total: int, page: int, limit: int) -> OrderListEnvelope:
    data = [build_order_response(order) for order in orders]
    return OrderListEnvelope(
        data=data,
        count=len(data),
        total=total,
        pagination=Pagination(page=page, limit=limit, pages=math.ceil(total / limit) if limit else 0),
    )
