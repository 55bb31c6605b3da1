import asyncio

from bizhub.db.session import engine
from bizhub.db.base import Base

# import every model so its table is registered on Base.metadata
from bizhub.models import (  # noqa: F401
    Company, Product, Account, Order, OrderItem, OrderFlow, SalesJournalEntry
)


async def ensure_tables_exist() -> None:
    """
    Create missing tables (called on application startup)
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


if __name__ == "__main__":
    asyncio.run(ensure_tables_exist())
