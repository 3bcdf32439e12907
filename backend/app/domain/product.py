"""
Product Domain Model

Represents a product entity in the catalog.

Author: DSW
Date: 2025-10-17
"""
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from decimal import Decimal
from uuid import UUID


class ProductBase(BaseModel):
    sku: str = Field(..., min_length=1, max_length=100, description="Stock Keeping Unit")
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    current_unit_price: Decimal = Field(..., ge=Decimal("0.01"), decimal_places=2, description="Sale price")
    stock_quantity: int = Field(0, ge=0, description="Units in stock")
    is_active: bool = Field(True, description="Whether product is active")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,  # Allow creation from ORM objects
    )


class ProductCreate(ProductBase):
    """Schema for creating a new product"""


class ProductUpdate(BaseModel):
    """
    Schema for replacing an existing product

    Stock is not editable here: it only moves through orders.
    Leaving is_active out keeps the current value.
    """

    sku: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    current_unit_price: Decimal = Field(..., ge=Decimal("0.01"), decimal_places=2)
    is_active: Optional[bool] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Product(ProductBase):
    """
    Product domain model - represents a product in our catalog

    Fields:
        id: Product ID (primary key)
        sku: Stock Keeping Unit (unique identifier)
        name: Product name
        description: Product description (optional)
        current_unit_price: Price charged for new orders
        stock_quantity: Units available for reservation
        is_active: Whether product is active in catalog
    """

    id: UUID = Field(..., description="Product ID")

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0
