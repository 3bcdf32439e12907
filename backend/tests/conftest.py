"""
Pytest fixtures and configuration for the backend tests

Every test gets its own in-memory SQLite database with the schema
created, a session factory bound to it, and a small seeded catalog.

Author: DSW
Date: 2025-10-17
"""
import uuid
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.auth import ADMIN, CUSTOMER
from app.core.config import settings
from app.core.database import create_db_engine, get_session_factory, init_db, transaction
from app.main import create_app
from app.models import Customer, Order, Product


@pytest.fixture(scope="function")
def engine():
    """
    Provides a fresh in-memory database for each test

    StaticPool keeps the single SQLite connection alive across sessions.
    """
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def customer(session_factory):
    """Customer C1"""
    with transaction(session_factory) as session:
        c1 = Customer(
            id=uuid.uuid4(),
            name="Ana Torres",
            email="ana.torres@example.com",
            address="Av. Corrientes 1234, Buenos Aires",
        )
        session.add(c1)
    return c1


@pytest.fixture
def other_customer(session_factory):
    with transaction(session_factory) as session:
        c2 = Customer(
            id=uuid.uuid4(),
            name="Bruno Díaz",
            email="bruno.diaz@example.com",
            address="Calle 9 de Julio 55, Rosario",
        )
        session.add(c2)
    return c2


def make_product(session_factory, sku, name, price, stock, is_active=True):
    with transaction(session_factory) as session:
        product = Product(
            id=uuid.uuid4(),
            sku=sku,
            name=name,
            current_unit_price=Decimal(price),
            stock_quantity=stock,
            is_active=is_active,
        )
        session.add(product)
    return product


@pytest.fixture
def products(session_factory):
    """
    Seeded catalog

    p1: stock 5, price 9.99
    p2: stock 10, price 4.50
    p3: stock 2, price 100.00
    inactive: stock 50, deactivated
    """
    return {
        "p1": make_product(session_factory, "KB-001", "Teclado mecánico", "9.99", 5),
        "p2": make_product(session_factory, "MS-010", "Mouse inalámbrico", "4.50", 10),
        "p3": make_product(session_factory, "MN-240", "Monitor 24 pulgadas", "100.00", 2),
        "inactive": make_product(session_factory, "OLD-999", "Producto discontinuado", "1.00", 50, is_active=False),
    }


def stock_of(session_factory, product_id):
    with transaction(session_factory) as session:
        return session.get(Product, product_id).stock_quantity


def order_count(session_factory):
    with transaction(session_factory) as session:
        return session.query(Order).count()


@pytest.fixture
def get_stock(session_factory):
    return lambda product_id: stock_of(session_factory, product_id)


@pytest.fixture
def count_orders(session_factory):
    return lambda: order_count(session_factory)


# ============================================================================
# API fixtures
# ============================================================================

def make_token(role, customer_id=None, email="user@example.com", sub=None):
    payload = {
        "sub": sub or str(uuid.uuid4()),
        "email": email,
        "name": "Test User",
        "role": role,
    }
    if customer_id is not None:
        payload["customer_id"] = str(customer_id)
    return jwt.encode(payload, settings.AUTH_SECRET, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token(ADMIN, email='admin@example.com')}"}


@pytest.fixture
def customer_headers(customer):
    token = make_token(CUSTOMER, customer_id=customer.id, email=customer.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_customer_headers(other_customer):
    token = make_token(CUSTOMER, customer_id=other_customer.id, email=other_customer.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def api_app(session_factory):
    """FastAPI app wired to the test database"""
    app = create_app(init_database=False, debug=False)
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    return app


@pytest.fixture
def client(api_app):
    return TestClient(api_app)
