"""
Order workflow

Coordinates every order write with product stock, customer credit and the
company sales journal:

- stock reservation, pricing and the order row are written in one
  transaction, so a failure leaves no partial stock change behind
- the credit debit/credit-back and journal appends run in SAVEPOINTs and are
  best-effort: a failure is logged and rolled back on its own, unless
  STRICT_LEDGER_SIDE_EFFECTS is set
- every write leaves an OrderFlow row behind
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from bizhub.core.enums import (
    PaymentMethod, PaymentStatus, ReviewStatus, SimpleStatus
)
from bizhub.core.exceptions import AccessDenied, ValidationError
from bizhub.core.logging_config import get_logger
from bizhub.core.tenant import TenantContext
from bizhub.models.account import Account
from bizhub.models.order import Order, OrderItem
from bizhub.models.order_flow import OrderFlow
from bizhub.repositories.orders import OrderRepository, SORT_COLUMNS
from bizhub.repositories.products import ProductRepository
from bizhub.schemas.order import (
    OrderCreate, OrderItemCreate, OrderStatistics, OrderStatusChange, OrderUpdate
)
from bizhub.services import pricing
from bizhub.services.account_ledger import AccountCreditLedger
from bizhub.services.order_status import (
    CANCELLED_STATES, from_simple_status, is_cancelled, to_simple_status, transition
)
from bizhub.services.product_ledger import ProductLedger
from bizhub.services.sales_journal import CompanySalesJournal

logger = get_logger(__name__)

CONTACT_FIELDS = ("contact_name", "contact_email", "contact_phone", "priority", "notes")


class OrderWorkflow:
    def __init__(self, db: AsyncSession, tenant: TenantContext):
        self.db = db
        self.tenant = tenant
        self.config = tenant.config
        self.orders = OrderRepository(db, tenant)
        self.products = ProductRepository(db, tenant)
        self.stock = ProductLedger(db, tenant)
        self.credit = AccountCreditLedger(db, tenant)
        self.journal = CompanySalesJournal(db, tenant)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    async def _side_effect(self, label: str, order: Order, func, *args) -> Any:
        """Run a ledger call in a SAVEPOINT; failures only abort it in strict mode"""
        try:
            async with self.db.begin_nested():
                return await func(*args)
        except Exception:
            if self.config.STRICT_LEDGER_SIDE_EFFECTS:
                raise
            logger.exception(f"{label} failed for order {order.order_no}, order write kept")
            return None

    def _add_flow(
        self,
        order: Order,
        flow_type: str,
        description: str,
        from_status: Optional[str] = None,
        to_status: Optional[str] = None,
        meta_data: Optional[dict] = None,
        notes: Optional[str] = None) -> OrderFlow:
        flow = OrderFlow(
            flow_type=flow_type,
            from_status=from_status,
            to_status=to_status,
            description=description,
            meta_data=meta_data,
            notes=notes,
            operator_id=self.tenant.actor_id,
            operated_at=datetime.utcnow(),
        )
        order.flows.append(flow)
        return flow

    def _ensure_can_touch(self, order: Order, action: str = "modify") -> None:
        if self.tenant.is_restricted and order.created_by != self.tenant.actor_id:
            logger.warning(
                f"Actor {self.tenant.actor_id} ({self.tenant.role}) tried to {action} "
                f"order {order.id} created by {order.created_by}"
            )
            raise AccessDenied(f"Access denied. You can only {action} your own orders.")

    async def _load_for_write(self, order_id: int) -> Order:
        order = await self.orders.get(order_id, refresh=True)
        self._ensure_can_touch(order)
        return order

    async def _build_items(self, items: Sequence[OrderItemCreate]) -> Tuple[List[OrderItem], pricing.OrderPrice]:
        """Reserve stock for each requested line and price it"""
        order_items = []
        lines = []
        for entry in items:
            product = await self.products.get(entry.product_id)
            if not product.is_active:
                raise ValidationError(f"Product \"{product.name}\" is not available for sale")

            _, taken = await self.stock.reserve(product.id, entry.quantity)

            unit_price = product.price if entry.unit_price is None else entry.unit_price
            vat_rate = product.vat_rate if entry.vat_rate is None else entry.vat_rate
            line = pricing.compute_line(entry.quantity, unit_price, vat_rate)
            lines.append(line)

            order_items.append(OrderItem(
                product_id=product.id,
                product_name=entry.product_name or product.name,
                sku=entry.sku or product.sku,
                brand=entry.brand or product.brand,
                category=entry.category or product.category,
                quantity=entry.quantity,
                reserved_quantity=taken,
                unit_price=pricing.to_money(line.unit_price),
                vat_rate=line.vat_rate,
                vat_amount=line.vat_amount,
                line_subtotal=line.line_subtotal,
                line_total=line.line_total,
            ))
        return order_items, pricing.summarize(lines)

    @staticmethod
    def _apply_price(order: Order, price: pricing.OrderPrice) -> None:
        order.subtotal = price.subtotal
        order.delivery_cost = price.delivery_cost
        order.total_vat = price.total_vat
        order.grand_total = price.grand_total

    async def _release_items(self, items: Sequence[OrderItem]) -> None:
        for item in items:
            units = item.quantity if item.reserved_quantity is None else item.reserved_quantity
            if units:
                await self.stock.release(item.product_id, units, missing_ok=True)

    async def _order_account(self, order: Order) -> Optional[Account]:
        """Account an order bills to: the captured id, else the name snapshot"""
        if order.account_id is not None:
            return await self.credit.resolve(account_id=order.account_id)
        return await self.credit.resolve(account_name=order.customer_name)

    async def _apply_review_transition(self, order: Order, target: ReviewStatus, notes: Optional[str] = None) -> bool:
        """Move the order along the review axis; entering a cancelled state gives stock back"""
        current = order.review_status
        new_state = transition(current, target)
        if new_state.value == current:
            return False

        if is_cancelled(new_state) and not is_cancelled(current):
            items = list(order.items)
            await self._release_items(items)
            await self._side_effect("Journal reversal", order, self.journal.reverse, order, items)

        order.review_status = new_state.value
        self._add_flow(
            order,
            "status_changed",
            f"Status changed: {to_simple_status(current).value} -> {to_simple_status(new_state).value}",
            from_status=current,
            to_status=new_state.value,
            notes=notes,
        )
        logger.info(f"Order {order.order_no}: {current} -> {new_state.value} by actor {self.tenant.actor_id}")
        return True

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------

    async def create_order(self, data: OrderCreate) -> Order:
        """Reserve stock, price and persist an order, then run the ledger side effects"""
        self.tenant.ensure_same_company(data.company_id, "create orders for")

        try:
            account = await self.credit.resolve(
                account_id=data.account_id,
                account_name=None if data.account_id is not None else data.customer_name,
            )
            customer_name = data.customer_name or (account.name if account else None)
            if not customer_name:
                raise ValidationError("Customer name is required", errors=["customer_name: required"])

            items, price = await self._build_items(data.items)

            order = Order(
                order_no=await self.orders.generate_order_no(data.order_type.value),
                order_type=data.order_type.value,
                account_id=account.id if account else None,
                customer_name=customer_name,
                contact_name=data.contact_name,
                contact_email=data.contact_email,
                contact_phone=data.contact_phone,
                payment_method=data.payment_method.value,
                payment_status=PaymentStatus.PENDING.value,
                currency=self.config.DEFAULT_CURRENCY,
                review_status=ReviewStatus.PENDING_REVIEW.value,
                priority=data.priority.value,
                notes=data.notes,
                created_by=self.tenant.actor_id,
                items=items,
                flows=[],
            )
            self._apply_price(order, price)
            self._add_flow(
                order,
                "created",
                f"Order created: {len(items)} items, total {order.grand_total} {order.currency}",
                to_status=order.review_status,
            )
            await self.orders.add(order)

            if order.is_credit:
                await self._side_effect("Credit debit", order, self.credit.debit, order.grand_total, account)
            await self._side_effect("Journal append", order, self.journal.append, order, list(order.items))

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            f"Order {order.order_no} created: company={self.tenant.company_id} "
            f"actor={self.tenant.actor_id} total={order.grand_total}"
        )
        return await self.orders.get(order.id, refresh=True)

    async def _replace_items(self, order: Order, items: Sequence[OrderItemCreate]) -> None:
        if order.review_status != ReviewStatus.PENDING_REVIEW.value or order.is_paid:
            raise ValidationError("Items can only be changed while the order is pending review and unpaid")

        old_items = list(order.items)
        old_total = order.grand_total

        await self._side_effect("Journal reversal", order, self.journal.reverse, order, old_items)
        await self._release_items(old_items)

        new_items, price = await self._build_items(items)
        order.items = new_items
        self._apply_price(order, price)
        await self.db.flush()

        if order.is_credit:
            delta = order.grand_total - old_total
            if delta:
                account = await self._order_account(order)
                if delta > 0:
                    await self._side_effect("Credit debit", order, self.credit.debit, delta, account)
                else:
                    await self._side_effect("Credit-back", order, self.credit.credit, -delta, account)
        await self._side_effect("Journal append", order, self.journal.append, order, new_items)

        self._add_flow(
            order,
            "items_replaced",
            f"Items replaced: total {old_total} -> {order.grand_total}",
            meta_data={"old_total": float(old_total), "new_total": float(order.grand_total)},
        )

    async def _mark_paid(self, order: Order, requested: PaymentStatus) -> None:
        """Record payment; allowed on cancelled orders so their credit debit can still be settled"""
        if requested.value == order.payment_status:
            return
        if order.is_paid:
            raise ValidationError("Payment status cannot be changed from paid back to pending")

        order.payment_status = PaymentStatus.PAID.value
        if order.is_credit:
            account = await self._order_account(order)
            await self._side_effect("Credit-back", order, self.credit.credit, order.grand_total, account)
        self._add_flow(order, "payment_received", f"Payment received: {order.grand_total} {order.currency}")

    async def update_order(self, order_id: int, data: OrderUpdate) -> Order:
        try:
            order = await self._load_for_write(order_id)
            self.tenant.ensure_same_company(data.company_id, "move orders to")

            changes = data.model_dump(exclude_unset=True)
            if data.review_status is not None and not self.tenant.is_reviewer:
                raise AccessDenied("Access denied. Only reviewers can change the review status.")

            if data.items is not None:
                await self._replace_items(order, data.items)

            changed = {}
            for field in CONTACT_FIELDS:
                if field in changes:
                    value = getattr(data, field)
                    if hasattr(value, "value"):
                        value = value.value
                    if getattr(order, field) != value:
                        changed[field] = value
                        setattr(order, field, value)
            if changed:
                self._add_flow(order, "updated", f"Updated: {', '.join(sorted(changed))}")

            if data.review_status is not None:
                await self._apply_review_transition(order, data.review_status)

            if data.payment_status is not None:
                await self._mark_paid(order, data.payment_status)

            order.updated_by = self.tenant.actor_id
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return await self.orders.get(order_id, refresh=True)

    async def change_status(self, order_id: int, data: OrderStatusChange) -> Order:
        """
        Status-only update with a simple status.

        Reviewers may make any legal move; other roles may only cancel an
        order that is still pending review.
        """
        try:
            order = await self._load_for_write(order_id)
            target = from_simple_status(data.status)

            if target.value != order.review_status and not self.tenant.is_reviewer:
                if target is not ReviewStatus.CANCELLED:
                    raise AccessDenied(
                        f"Access denied. Role '{self.tenant.role}' cannot set order status to {data.status.value}."
                    )
                if order.review_status != ReviewStatus.PENDING_REVIEW.value:
                    raise ValidationError("Only orders pending review can be cancelled")

            await self._apply_review_transition(order, target, data.notes)
            order.updated_by = self.tenant.actor_id
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return await self.orders.get(order_id, refresh=True)

    async def delete_order(self, order_id: int) -> Order:
        """Give stock back (unless already cancelled), reverse the journal and delete"""
        self.tenant.require_role(self.config.ELEVATED_ROLES, "delete orders")
        try:
            order = await self.orders.get(order_id, refresh=True)
            if not is_cancelled(order.review_status):
                items = list(order.items)
                await self._release_items(items)
                await self._side_effect("Journal reversal", order, self.journal.reverse, order, items)

            await self.db.delete(order)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Order {order.order_no} deleted by actor {self.tenant.actor_id}")
        return order

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------

    async def get_order(self, order_id: int) -> Order:
        order = await self.orders.get(order_id, refresh=True)
        self._ensure_can_touch(order, "view")
        return order

    async def list_orders(
        self,
        *,
        page: int = 1,
        limit: Optional[int] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        **filters: Any) -> Tuple[List[Order], int]:
        """One page of orders plus the total match count"""
        if self.tenant.is_restricted:
            filters["created_by"] = self.tenant.actor_id

        column = SORT_COLUMNS.get(sort_by)
        if column is None:
            raise ValidationError(f"Cannot sort by {sort_by}", errors=[f"sort_by: one of {', '.join(SORT_COLUMNS)}"])
        ordering = column.asc() if sort_order == "asc" else column.desc()

        limit = min(limit or self.config.DEFAULT_PAGE_SIZE, self.config.MAX_PAGE_SIZE)
        page = max(page, 1)

        conditions = self.orders.build_conditions(**filters)
        total = await self.orders.count(*conditions)
        orders = await self.orders.list(
            *conditions,
            order_by=[ordering, Order.id.desc()],
            offset=(page - 1) * limit,
            limit=limit,
        )
        return orders, total

    async def list_company_orders(self, company_id: int, **kwargs: Any) -> Tuple[List[Order], int]:
        self.tenant.ensure_same_company(company_id, "view orders of")
        return await self.list_orders(**kwargs)

    async def statistics(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None) -> OrderStatistics:
        self.tenant.require_role(self.config.STATISTICS_ROLES, "view order statistics")

        conditions = self.orders.build_conditions(start_date=start_date, end_date=end_date)
        live = Order.review_status.not_in([state.value for state in CANCELLED_STATES])

        by_review = await self.orders.count_by(Order.review_status, *conditions)
        by_status: Dict[str, int] = {status.value: 0 for status in SimpleStatus}
        for review_status, count in by_review.items():
            by_status[to_simple_status(review_status).value] += count

        by_method = await self.orders.count_by(Order.payment_method, *conditions)
        by_payment_method = {method.value: by_method.get(method.value, 0) for method in PaymentMethod}

        live_count = await self.orders.count(live, *conditions)
        revenue = await self.orders.total(Order.grand_total, live, *conditions)
        outstanding = await self.orders.total(
            Order.grand_total,
            live,
            Order.payment_method == PaymentMethod.CREDIT.value,
            Order.payment_status == PaymentStatus.PENDING.value,
            *conditions,
        )
        average = revenue / live_count if live_count else Decimal("0")

        return OrderStatistics(
            total_orders=sum(by_review.values()),
            by_status=by_status,
            by_payment_method=by_payment_method,
            total_revenue=float(pricing.to_money(revenue)),
            average_order_value=float(pricing.to_money(average)),
            outstanding_credit=float(pricing.to_money(outstanding)),
        )
