"""
Tenant-scoped repository

Every query built here is filtered by the context's company id, so callers
cannot forget the isolation check. Lookups by id that miss are looked up once
more without the tenant filter to tell "belongs to another company"
(AccessDenied) from "does not exist" (NotFound).
"""

from decimal import Decimal
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from bizhub.core.exceptions import ConflictError, DuplicateResource, NotFound
from bizhub.core.tenant import TenantContext
from bizhub.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class TenantRepository(Generic[ModelT]):
    model: Type[ModelT]
    label: str = "Resource"
    # columns unique within a company
    unique_fields: Tuple[str, ...] = ()

    def __init__(self, db: AsyncSession, tenant: TenantContext):
        self.db = db
        self.tenant = tenant

    def query(self, *options: Any) -> Select:
        """SELECT scoped to the current company"""
        stmt = select(self.model).where(self.model.company_id == self.tenant.company_id)
        if options:
            stmt = stmt.options(*options)
        return stmt

    async def get(self, entity_id: int, *options: Any, refresh: bool = False) -> ModelT:
        stmt = self.query(*options).where(self.model.id == entity_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        entity = result.scalars().unique().one_or_none()
        if entity is None:
            await self._raise_missing(entity_id)
        return self.tenant.ensure_owned(entity, self.label)

    async def _raise_missing(self, entity_id: int) -> None:
        owner = (await self.db.execute(
            select(self.model.company_id).where(self.model.id == entity_id)
        )).scalar_one_or_none()
        if owner is not None:
            self.tenant.deny_foreign(self.label, entity_id)
        raise NotFound(f"{self.label} not found")

    async def find_one(self, *conditions: Any) -> Optional[ModelT]:
        result = await self.db.execute(self.query().where(*conditions))
        entity = result.scalars().first()
        if entity is not None:
            self.tenant.ensure_owned(entity, self.label)
        return entity

    async def list(
        self,
        *conditions: Any,
        options: Sequence[Any] = (),
        order_by: Sequence[Any] = (),
        offset: Optional[int] = None,
        limit: Optional[int] = None) -> List[ModelT]:
        stmt = self.query(*options).where(*conditions)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().unique().all())

    async def count(self, *conditions: Any) -> int:
        stmt = select(func.count(self.model.id)).where(
            self.model.company_id == self.tenant.company_id, *conditions
        )
        return (await self.db.execute(stmt)).scalar() or 0

    async def count_by(self, column: Any, *conditions: Any) -> Dict[Any, int]:
        """{value of column: row count}"""
        stmt = (
            select(column, func.count(self.model.id))
            .where(self.model.company_id == self.tenant.company_id, *conditions)
            .group_by(column)
        )
        result = await self.db.execute(stmt)
        return {value: count for value, count in result.all()}

    async def total(self, column: Any, *conditions: Any) -> Decimal:
        stmt = select(func.coalesce(func.sum(column), 0)).where(
            self.model.company_id == self.tenant.company_id, *conditions
        )
        return Decimal(str((await self.db.execute(stmt)).scalar() or 0))

    async def add(self, entity: ModelT) -> ModelT:
        """Insert into the current company; any client-supplied company id is overridden"""
        entity.company_id = self.tenant.company_id
        for field in self.unique_fields:
            value = getattr(entity, field)
            if await self.count(getattr(self.model, field) == value):
                raise DuplicateResource(self.label, field, value)
        self.db.add(entity)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            # lost a race with a concurrent insert of the same unique value
            raise ConflictError(f"{self.label} conflicts with an existing record, please retry") from exc
        return entity
