"""
Concurrent order operations

Threads race on a file-backed SQLite database. Stock must never go
negative and every unit sold must belong to exactly one stored order.
However status changes and deletes interleave, an order is restocked
at most once.

Author: DSW
Date: 2025-10-17
"""
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from sqlalchemy.orm import sessionmaker

from app.core.database import create_db_engine, init_db, transaction
from app.core.exceptions import ConflictError, InsufficientStockError, NotFoundError
from app.domain.order import OrderStatus
from app.models import Customer, Order, OrderItem, Product
from app.services.order_service import OrderService

BUYERS = 8
STOCK = 5


@pytest.fixture
def file_session_factory(tmp_path):
    engine = create_db_engine(
        f"sqlite:///{tmp_path / 'orders.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    init_db(engine)
    yield sessionmaker(autoflush=False, expire_on_commit=False, bind=engine)
    engine.dispose()


@pytest.fixture
def contested(file_session_factory):
    with transaction(file_session_factory) as session:
        customer = Customer(id=uuid.uuid4(), name="Carla Ruiz", email="carla@example.com", address="Mitre 10")
        product = Product(
            id=uuid.uuid4(),
            sku="LAST-UNITS",
            name="Edición limitada",
            current_unit_price=Decimal("25.00"),
            stock_quantity=STOCK,
        )
        session.add_all([customer, product])
    return customer, product


def test_concurrent_orders_never_oversell(file_session_factory, contested):
    customer, product = contested
    service = OrderService(file_session_factory, max_retries=20, retry_delay=0.01)

    def buy(_):
        try:
            return service.create_order(customer.id, "Mitre 10", "Mitre 10", [(product.id, 1)])
        except InsufficientStockError:
            return None

    with ThreadPoolExecutor(max_workers=BUYERS) as pool:
        results = list(pool.map(buy, range(BUYERS)))

    placed = [order for order in results if order is not None]
    assert len(placed) == STOCK

    with transaction(file_session_factory) as session:
        stock = session.get(Product, product.id).stock_quantity
        orders = session.query(Order).count()
        units = sum(item.quantity for item in session.query(OrderItem).all())

    assert stock == 0
    assert orders == STOCK
    assert units == STOCK


# ============================================================================
# Status changes and deletes on the same order
# ============================================================================

SHELF_STOCK = 10
ORDERED = 3


@pytest.fixture
def service(file_session_factory):
    return OrderService(file_session_factory, max_retries=20, retry_delay=0.01)


@pytest.fixture
def processing_order(file_session_factory, service):
    """A Processing order for 3 of the 10 units on the shelf"""
    with transaction(file_session_factory) as session:
        customer = Customer(id=uuid.uuid4(), name="Diego Paz", email="diego@example.com", address="Salta 77")
        product = Product(
            id=uuid.uuid4(),
            sku="SHELF-10",
            name="Lámpara de escritorio",
            current_unit_price=Decimal("18.00"),
            stock_quantity=SHELF_STOCK,
        )
        session.add_all([customer, product])

    order = service.create_order(customer.id, "Salta 77", "Salta 77", [(product.id, ORDERED)])
    service.update_order_status(order.id, OrderStatus.PROCESSING)
    return order, product


def race(monkeypatch, service, *actions):
    """
    Run actions on separate threads, each pausing after it reads the order

    Every thread waits up to a second for the others to read the same
    order too, so unsynchronized writers all act on the same snapshot.
    Returns the sorted outcome names.
    """
    gate = threading.Barrier(len(actions))
    find_by_id = service.orders.find_by_id

    def find_then_wait(*args, **kwargs):
        order = find_by_id(*args, **kwargs)
        try:
            gate.wait(timeout=1)
        except threading.BrokenBarrierError:
            pass
        return order

    monkeypatch.setattr(service.orders, "find_by_id", find_then_wait)

    def outcome(action):
        try:
            action()
            return "ok"
        except NotFoundError:
            return "missing"
        except ConflictError:
            return "conflict"

    with ThreadPoolExecutor(max_workers=len(actions)) as pool:
        return sorted(pool.map(outcome, actions))


def stored_state(session_factory, order_id, product_id):
    with transaction(session_factory) as session:
        order = session.get(Order, order_id)
        stock = session.get(Product, product_id).stock_quantity
        return (order.status if order is not None else None), stock


def test_complete_and_cancel_race(monkeypatch, file_session_factory, service, processing_order):
    order, product = processing_order

    outcomes = race(
        monkeypatch,
        service,
        lambda: service.update_order_status(order.id, "Completed"),
        lambda: service.update_order_status(order.id, "Cancelled"),
    )

    assert outcomes == ["conflict", "ok"]
    status, stock = stored_state(file_session_factory, order.id, product.id)
    assert (status, stock) in {
        (OrderStatus.COMPLETED, SHELF_STOCK - ORDERED),
        (OrderStatus.CANCELLED, SHELF_STOCK),
    }


def test_two_cancels_restock_once(monkeypatch, file_session_factory, service, processing_order):
    order, product = processing_order

    outcomes = race(
        monkeypatch,
        service,
        lambda: service.update_order_status(order.id, "Cancelled"),
        lambda: service.update_order_status(order.id, "Cancelled"),
    )

    assert outcomes == ["conflict", "ok"]
    assert stored_state(file_session_factory, order.id, product.id) == (OrderStatus.CANCELLED, SHELF_STOCK)


def test_two_deletes_restock_once(monkeypatch, file_session_factory, service, processing_order):
    order, product = processing_order

    outcomes = race(
        monkeypatch,
        service,
        lambda: service.delete_order(order.id),
        lambda: service.delete_order(order.id),
    )

    assert outcomes.count("ok") == 1
    assert set(outcomes) - {"ok"} <= {"missing", "conflict"}
    assert stored_state(file_session_factory, order.id, product.id) == (None, SHELF_STOCK)


def test_delete_and_cancel_race(monkeypatch, file_session_factory, service, processing_order):
    order, product = processing_order

    outcomes = race(
        monkeypatch,
        service,
        lambda: service.delete_order(order.id),
        lambda: service.update_order_status(order.id, "Cancelled"),
    )

    # Cancel first then delete, or delete first and the cancel finds nothing
    assert outcomes in (["ok", "ok"], ["missing", "ok"])
    assert stored_state(file_session_factory, order.id, product.id) == (None, SHELF_STOCK)


def test_delete_and_complete_race(monkeypatch, file_session_factory, service, processing_order):
    order, product = processing_order

    outcomes = race(
        monkeypatch,
        service,
        lambda: service.delete_order(order.id),
        lambda: service.update_order_status(order.id, "Completed"),
    )

    # Completed orders cannot be deleted, deleted orders cannot be completed
    assert outcomes.count("ok") == 1
    status, stock = stored_state(file_session_factory, order.id, product.id)
    assert (status, stock) in {
        (OrderStatus.COMPLETED, SHELF_STOCK - ORDERED),
        (None, SHELF_STOCK),
    }
