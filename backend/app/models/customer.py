"""
Modelo de clientes
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Uuid
from sqlalchemy.orm import relationship

from app.core.database import Base


class Customer(Base):
    """
    Clientes (read-only from the order workflow's point of view)
    """
    __tablename__ = "customers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    address = Column(String(200), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationships
    orders = relationship("Order", back_populates="customer")
