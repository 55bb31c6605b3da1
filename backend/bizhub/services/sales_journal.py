"""
Company sales journal

Append-only: sales add rows, corrections add reversal rows. Each append also
moves the company's running balance and recomputes its payment status.
"""

from decimal import Decimal
from typing import Iterable, List

from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bizhub.core.enums import JournalEntryType
from bizhub.core.logging_config import get_logger
from bizhub.core.tenant import TenantContext
from bizhub.models.company import Company, derive_payment_status
from bizhub.models.order import Order, OrderItem
from bizhub.models.sales_journal import SalesJournalEntry

logger = get_logger(__name__)


class CompanySalesJournal:
    def __init__(self, db: AsyncSession, tenant: TenantContext):
        self.db = db
        self.tenant = tenant

    def _rows(self, order: Order, items: Iterable[OrderItem], entry_type: JournalEntryType) -> List[SalesJournalEntry]:
        return [
            SalesJournalEntry(
                company_id=self.tenant.company_id,
                order_id=order.id,
                product_id=item.product_id,
                product_name=item.product_name,
                brand=item.brand,
                category=item.category,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.line_total,
                payment_type=order.payment_method,
                entry_type=entry_type.value,
            )
            for item in items
        ]

    async def append(self, order: Order, items: Iterable[OrderItem]) -> List[SalesJournalEntry]:
        """Record one sale row per item"""
        rows = self._rows(order, items, JournalEntryType.SALE)
        total = sum((row.total_price for row in rows), Decimal("0.00"))
        self.db.add_all(rows)

        await self.db.execute(
            update(Company).where(Company.id == self.tenant.company_id)
            .values(current_balance=Company.current_balance + total)
            .execution_options(synchronize_session=False)
        )
        await self._refresh_payment_status()
        logger.info(f"Sales journal: order {order.order_no} +{total} ({len(rows)} rows)")
        return rows

    async def reverse(self, order: Order, items: Iterable[OrderItem]) -> List[SalesJournalEntry]:
        """Record one reversal row per item; the company balance never goes below zero"""
        rows = self._rows(order, items, JournalEntryType.REVERSAL)
        total = sum((row.total_price for row in rows), Decimal("0.00"))
        self.db.add_all(rows)

        new_balance = Company.current_balance - total
        await self.db.execute(
            update(Company).where(Company.id == self.tenant.company_id)
            .values(current_balance=case((new_balance > 0, new_balance), else_=0))
            .execution_options(synchronize_session=False)
        )
        await self._refresh_payment_status()
        logger.info(f"Sales journal: order {order.order_no} -{total} reversed ({len(rows)} rows)")
        return rows

    async def _refresh_payment_status(self) -> None:
        company = await self.db.get(Company, self.tenant.company_id, populate_existing=True)
        status = derive_payment_status(
            company.credit_limit, company.current_balance, self.tenant.config.COMPANY_WARNING_RATIO
        )
        if status != company.payment_status:
            logger.info(f"Company {company.id} payment status: {company.payment_status} -> {status}")
            company.payment_status = status
        await self.db.flush()

    async def entries_for(self, order_id: int) -> List[SalesJournalEntry]:
        result = await self.db.execute(
            select(SalesJournalEntry).where(
                SalesJournalEntry.company_id == self.tenant.company_id,
                SalesJournalEntry.order_id == order_id,
            ).order_by(SalesJournalEntry.id)
        )
        return list(result.scalars().all())
