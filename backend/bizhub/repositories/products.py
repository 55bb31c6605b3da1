from typing import Optional

from bizhub.models.product import Product
from bizhub.repositories.base import TenantRepository


class ProductRepository(TenantRepository[Product]):
    model = Product
    label = "Product"
    unique_fields = ("sku",)

    async def get_by_sku(self, sku: str) -> Optional[Product]:
        return await self.find_one(Product.sku == sku.strip().upper())

    async def add(self, entity: Product) -> Product:
        entity.sku = (entity.sku or "").strip().upper()
        return await super().add(entity)
