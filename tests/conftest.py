import os

# must be set before shared.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from shared.core.database import Base, EstateSessionLocal, estate_engine
from estate_service.app.main import app
from estate_service.app.crud.leasing_tenants import leases_crud
from estate_service.app.models.leasing_tenants.tenants import Tenant
from estate_service.app.models.owners.owners import Owner
from estate_service.app.models.owners.shops import Shop
from estate_service.app.schemas.leasing_tenants.leases_schemas import LeaseCreate

TODAY = date(2024, 5, 15)


@pytest.fixture(autouse=True)
def reset_schema():
    Base.metadata.drop_all(bind=estate_engine)
    Base.metadata.create_all(bind=estate_engine)
    yield


@pytest.fixture
def db():
    session = EstateSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def owner(db):
    owner = Owner(name="Rahim Uddin", phone="01710000000")
    db.add(owner)
    db.commit()
    return owner


@pytest.fixture
def tenant(db):
    tenant = Tenant(name="Karim Traders", phone="01820000000", opening_due_balance=0)
    db.add(tenant)
    db.commit()
    return tenant


@pytest.fixture
def make_shop(db, owner):
    counter = {"n": 0}

    def _make(ownership_type="sole"):
        counter["n"] += 1
        shop = Shop(
            shop_number=f"G-{counter['n']:02d}",
            floor="ground",
            ownership_type=ownership_type,
            owner_id=owner.id if ownership_type == "sole" else None,
            status="vacant",
        )
        db.add(shop)
        db.commit()
        return shop

    return _make


@pytest.fixture
def make_lease(db, tenant, make_shop):
    def _make(start=date(2024, 1, 1), end=date(2024, 12, 31), rent="10000",
              deposit="0", opening="0", tenant_id=None, today=TODAY,
              ownership_type="sole"):
        shop = make_shop(ownership_type)
        out = leases_crud.create_lease(db, LeaseCreate(
            tenant_id=tenant_id or tenant.id,
            shop_id=shop.id,
            start_date=start,
            end_date=end,
            monthly_rent=Decimal(rent),
            security_deposit=Decimal(deposit),
            opening_due_balance=Decimal(opening),
        ), today=today)
        return out.id

    return _make
