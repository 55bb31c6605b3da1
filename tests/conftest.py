"""
Shared fixtures

Each test gets its own in-memory database. Two tenants are seeded:

    company A (active): widget, gadget, scarce (stock 3), bulk; account "Corner Cafe"
    company B (active): b_widget; account "Beta Customer"
    company C (inactive)
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from bizhub.core.config import Settings
from bizhub.core.deps import get_db
from bizhub.core.enums import Role
from bizhub.core.tenant import TenantContext
from bizhub.db.base import Base
from bizhub.db.session import enable_sqlite_savepoints, make_session_factory
from bizhub.main import app
from bizhub.models import Account, Company, Product
from bizhub.schemas.actor import Actor

OWNER_A = 1
SALESMAN_A = 2
OTHER_SALESMAN_A = 3
ACCOUNTANT_A = 4
OWNER_B = 10


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_savepoints(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
async def seed(session_factory):
    """Committed tenants, products and accounts; returned objects are detached"""
    async with session_factory() as session:
        company_a = Company(name="Alpha Trading", email="alpha@example.com", credit_limit=Decimal("5000"))
        company_b = Company(name="Beta Supplies", email="beta@example.com", credit_limit=Decimal("5000"))
        company_c = Company(name="Closed Corp", email="closed@example.com", is_active=False)
        session.add_all([company_a, company_b, company_c])
        await session.flush()

        def product(company, name, sku, price, vat_rate, stock):
            return Product(
                company_id=company.id,
                name=name,
                sku=sku,
                brand="Acme",
                category="General",
                price=Decimal(price),
                cost=Decimal("1.00"),
                vat_rate=Decimal(vat_rate),
                stock_current=stock,
            )

        widget = product(company_a, "Widget", "WID-1", "10.00", "10", 100)
        gadget = product(company_a, "Gadget", "GAD-1", "5.00", "0", 100)
        scarce = product(company_a, "Scarce Item", "SCA-1", "20.00", "10", 3)
        bulk = product(company_a, "Bulk Pack", "BLK-1", "30.00", "0", 50)
        b_widget = product(company_b, "Beta Widget", "BWID-1", "10.00", "10", 10)
        cafe = Account(company_id=company_a.id, name="Corner Cafe", credit_limit=Decimal("1000"))
        beta_customer = Account(company_id=company_b.id, name="Beta Customer", credit_limit=Decimal("1000"))
        session.add_all([widget, gadget, scarce, bulk, b_widget, cafe, beta_customer])
        await session.commit()

    return SimpleNamespace(
        company_a=company_a,
        company_b=company_b,
        company_c=company_c,
        widget=widget,
        gadget=gadget,
        scarce=scarce,
        bulk=bulk,
        b_widget=b_widget,
        cafe=cafe,
        beta_customer=beta_customer,
    )


@pytest.fixture
async def db(session_factory, seed):
    async with session_factory() as session:
        yield session


@pytest.fixture
def fetch(session_factory):
    """Read a row through a short-lived session"""
    async def _fetch(model, ident):
        async with session_factory() as session:
            return await session.get(model, ident)
    return _fetch


@pytest.fixture
def make_tenant(db):
    async def _make(company_id, actor_id=OWNER_A, role=Role.OWNER, **overrides):
        config = Settings(**overrides) if overrides else None
        actor = Actor(id=actor_id, company_id=company_id, role=role)
        return await TenantContext.resolve(db, actor, config)
    return _make


@pytest.fixture
async def tenant_a(make_tenant, seed):
    return await make_tenant(seed.company_a.id)


@pytest.fixture
async def tenant_b(make_tenant, seed):
    return await make_tenant(seed.company_b.id, actor_id=OWNER_B)


@pytest.fixture
async def client(session_factory, seed):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def headers(seed):
    def _headers(actor_id=OWNER_A, company=None, role="owner", with_company=True):
        result = {"X-Actor-Id": str(actor_id), "X-Actor-Role": role}
        if with_company:
            result["X-Company-Id"] = str((company or seed.company_a).id)
        return result
    return _headers
