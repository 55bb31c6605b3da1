"""
Product stock ledger

The only writer of Product.stock_current and Product.status. Each mutation is
a single UPDATE statement that changes stock and recomputes status together,
so concurrent orders cannot oversell and status never drifts from stock.
"""

from typing import Optional, Tuple

from sqlalchemy import case, update
from sqlalchemy.ext.asyncio import AsyncSession

from bizhub.core.enums import ProductStatus
from bizhub.core.exceptions import InsufficientStock, NotFound, ValidationError
from bizhub.core.logging_config import get_logger
from bizhub.core.tenant import TenantContext
from bizhub.models.product import Product
from bizhub.repositories.products import ProductRepository

logger = get_logger(__name__)

REJECT = "reject"
CLAMP = "clamp"


def _status_after(new_stock):
    return case(
        (new_stock > 0, ProductStatus.ACTIVE.value),
        else_=ProductStatus.OUT_OF_STOCK.value,
    )


class ProductLedger:
    def __init__(self, db: AsyncSession, tenant: TenantContext, policy: Optional[str] = None):
        self.db = db
        self.tenant = tenant
        self.products = ProductRepository(db, tenant)
        self.policy = policy or tenant.config.STOCK_SHORTFALL_POLICY

    def _scoped_update(self, product_id: int):
        return update(Product).where(
            Product.id == product_id,
            Product.company_id == self.tenant.company_id,
        ).execution_options(synchronize_session=False)

    async def reserve(self, product_id: int, quantity: int) -> Tuple[Product, int]:
        """
        Take ``quantity`` units out of stock.

        Returns the reloaded product and the number of units actually taken,
        which is what a later release must give back.

        reject policy: fails with InsufficientStock and leaves stock unchanged
        when fewer units are available.
        clamp policy: stock bottoms out at zero and the shortfall is logged.
        """
        if quantity is None or quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        product = await self.products.get(product_id, refresh=True)
        taken = quantity

        if self.policy == CLAMP:
            available = max(product.stock_current or 0, 0)
            if available < quantity:
                taken = available
                logger.warning(
                    f"Stock shortfall clamped: product={product.id} ({product.name}) "
                    f"available={available} requested={quantity}"
                )
            new_stock = Product.stock_current - quantity
            stmt = self._scoped_update(product_id).values(
                stock_current=case((new_stock > 0, new_stock), else_=0),
                status=_status_after(new_stock),
            )
            await self.db.execute(stmt)
        else:
            new_stock = Product.stock_current - quantity
            stmt = self._scoped_update(product_id).where(
                Product.stock_current >= quantity
            ).values(
                stock_current=new_stock,
                status=_status_after(new_stock),
            )
            result = await self.db.execute(stmt)
            if result.rowcount == 0:
                product = await self.products.get(product_id, refresh=True)
                raise InsufficientStock(product.name, product.stock_current or 0, quantity)

        product = await self.products.get(product_id, refresh=True)
        logger.info(f"Stock reserved: product={product.id} qty={taken} remaining={product.stock_current}")
        return product, taken

    async def release(self, product_id: int, quantity: int, missing_ok: bool = False) -> Optional[Product]:
        """
        Put ``quantity`` units back into stock.

        With ``missing_ok`` a product that no longer exists is skipped, which
        is what cancelling an order for a since-deleted product needs.
        """
        if quantity is None or quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        try:
            await self.products.get(product_id)
        except NotFound:
            if not missing_ok:
                raise
            logger.warning(f"Stock release skipped, product {product_id} no longer exists")
            return None

        new_stock = Product.stock_current + quantity
        await self.db.execute(
            self._scoped_update(product_id).values(
                stock_current=new_stock,
                status=_status_after(new_stock),
            )
        )
        product = await self.products.get(product_id, refresh=True)
        logger.info(f"Stock released: product={product.id} qty={quantity} remaining={product.stock_current}")
        return product
