"""
Shared fixtures: an in-memory SQLite database per test, seeded users and a
product, and a TestClient wired to the same session.
"""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from inventory.database import Base, get_db, init_db
from inventory.main import app
from inventory.models.product import Product
from inventory.models.user import UserRole
from inventory.schemas.user import UserCreate
from inventory.services import auth_service


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin(db):
    return auth_service.create_user(db, UserCreate(
        username="admin", password="admin123", role=UserRole.ADMIN, full_name="Admin",
    ))


@pytest.fixture
def staff(db):
    return auth_service.create_user(db, UserCreate(
        username="staff", password="staff123", role=UserRole.STAFF, full_name="Staff",
    ))


@pytest.fixture
def make_product(db):
    def _make(stock=0, minimum_stock=0, name="Widget", sku=None, price_in="4.00", price_out="6.50", **kwargs):
        product = Product(
            name=name,
            sku=sku,
            price_in=Decimal(price_in),
            price_out=Decimal(price_out),
            stock=stock,
            minimum_stock=minimum_stock,
            **kwargs,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def product(make_product):
    return make_product(stock=10, minimum_stock=2, sku="WID-001")


@pytest.fixture
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {auth_service.create_access_token(user)}"}


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def staff_headers(staff):
    return auth_headers(staff)
