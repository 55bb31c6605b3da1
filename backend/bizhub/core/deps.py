"""Request dependencies: database session, actor and tenant"""
from typing import AsyncGenerator, Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from bizhub.core.enums import Role
from bizhub.core.exceptions import AuthenticationRequired, ValidationError
from bizhub.core.tenant import TenantContext
from bizhub.db.session import SessionLocal
from bizhub.schemas.actor import Actor


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session for one request
    """
    async with SessionLocal() as session:
        yield session


async def get_current_actor(
    x_actor_id: Optional[int] = Header(None),
    x_company_id: Optional[int] = Header(None),
    x_actor_role: Optional[str] = Header(None),
    x_actor_name: Optional[str] = Header(None)) -> Actor:
    """
    Actor claims forwarded by the auth gateway after it validated the token
    """
    if x_actor_id is None:
        raise AuthenticationRequired()
    try:
        role = Role((x_actor_role or Role.SALESMAN.value).lower())
    except ValueError:
        raise ValidationError(f"Unknown role: {x_actor_role}", errors=["X-Actor-Role: unknown role"])
    return Actor(id=x_actor_id, company_id=x_company_id, role=role, name=x_actor_name)


async def get_tenant(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor)) -> TenantContext:
    return await TenantContext.resolve(db, actor)
