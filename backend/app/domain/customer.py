"""
Customer Domain Models

Author: DSW
Date: 2025-10-17
"""
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel
from datetime import datetime
from uuid import UUID


class CustomerBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Customer name")
    email: EmailStr = Field(..., description="Customer email (unique)")
    address: str = Field(..., min_length=1, max_length=200, description="Customer address")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CustomerCreate(CustomerBase):
    """Schema for creating a new customer"""


class CustomerUpdate(CustomerBase):
    """Schema for updating an existing customer"""


class Customer(CustomerBase):
    """Customer domain model"""

    id: UUID = Field(..., description="Customer ID")
    created_at: datetime = Field(..., description="Creation timestamp")
