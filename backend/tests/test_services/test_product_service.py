"""
Tests for ProductService

Author: DSW
Date: 2025-10-17
"""
import uuid
from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.core.exceptions import ConflictError, NotFoundError
from app.domain.product import ProductCreate, ProductUpdate
from app.services.order_service import OrderService
from app.services.product_service import ProductService


@pytest.fixture
def service(session_factory):
    return ProductService(session_factory)


class TestProductService:

    def test_list_active_products(self, service, products):
        skus = {p.sku for p in service.list_products()}

        assert skus == {"KB-001", "MS-010", "MN-240"}

    def test_list_including_inactive(self, service, products):
        assert len(service.list_products(include_inactive=True)) == 4

    def test_get_product(self, service, products):
        product = service.get_product(products["p1"].id)

        assert product.sku == "KB-001"
        assert product.current_unit_price == Decimal("9.99")
        assert product.stock_quantity == 5
        assert product.in_stock

    def test_get_unknown_product(self, service):
        with pytest.raises(NotFoundError):
            service.get_product(uuid.uuid4())

    def test_create_product(self, service):
        created = service.create_product(
            ProductCreate(sku="HD-500", name="Auriculares", current_unit_price=Decimal("35.00"), stock_quantity=12)
        )

        assert created.id is not None
        assert service.get_product(created.id).stock_quantity == 12

    def test_create_accepts_camel_case(self, service):
        data = ProductCreate.model_validate(
            {"sku": "CB-01", "name": "Cable", "currentUnitPrice": "2.50", "stockQuantity": 3}
        )

        created = service.create_product(data)

        assert created.current_unit_price == Decimal("2.50")
        assert created.stock_quantity == 3

    def test_create_duplicate_sku(self, service, products):
        with pytest.raises(ConflictError):
            service.create_product(ProductCreate(sku="KB-001", name="Otro", current_unit_price=Decimal("1.00")))

    @pytest.mark.parametrize("price", ["0", "0.00", "-1.00"])
    def test_price_must_be_positive(self, price):
        with pytest.raises(ValidationError):
            ProductCreate(sku="X-1", name="X", current_unit_price=Decimal(price))

    def test_stock_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            ProductCreate(sku="X-1", name="X", current_unit_price=Decimal("1.00"), stock_quantity=-1)

    def test_update_product_keeps_stock(self, service, products):
        p2 = products["p2"]

        updated = service.update_product(
            p2.id, ProductUpdate(sku="MS-011", name="Mouse inalámbrico v2", current_unit_price=Decimal("5.25"))
        )

        assert updated.sku == "MS-011"
        assert updated.current_unit_price == Decimal("5.25")
        assert updated.stock_quantity == 10

    def test_update_without_is_active_keeps_product_hidden(self, service, products):
        inactive = products["inactive"]

        updated = service.update_product(
            inactive.id, ProductUpdate(sku="OLD-999", name="Producto discontinuado", current_unit_price=Decimal("2.00"))
        )

        assert updated.current_unit_price == Decimal("2.00")
        assert updated.is_active is False
        assert not service.get_product(inactive.id).is_active

    def test_update_can_reactivate(self, service, products):
        inactive = products["inactive"]

        updated = service.update_product(
            inactive.id,
            ProductUpdate(sku="OLD-999", name="Producto discontinuado", current_unit_price=Decimal("1.00"), is_active=True),
        )

        assert updated.is_active is True

    def test_update_to_taken_sku(self, service, products):
        with pytest.raises(ConflictError):
            service.update_product(
                products["p2"].id, ProductUpdate(sku="KB-001", name="Mouse", current_unit_price=Decimal("4.50"))
            )

    def test_update_unknown_product(self, service):
        with pytest.raises(NotFoundError):
            service.update_product(uuid.uuid4(), ProductUpdate(sku="Z", name="Z", current_unit_price=Decimal("1.00")))

    def test_deactivate_product(self, service, products):
        service.deactivate_product(products["p1"].id)

        assert not service.get_product(products["p1"].id).is_active
        assert products["p1"].id not in {p.id for p in service.list_products()}

    def test_delete_product(self, service, products):
        service.delete_product(products["p3"].id)

        with pytest.raises(NotFoundError):
            service.get_product(products["p3"].id)

    def test_delete_product_referenced_by_order(self, service, session_factory, customer, products):
        OrderService(session_factory).create_order(customer.id, "A", "B", [(products["p1"].id, 1)])

        with pytest.raises(ConflictError):
            service.delete_product(products["p1"].id)

        assert service.get_product(products["p1"].id).stock_quantity == 4
