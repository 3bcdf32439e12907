"""
Modelos relacionados con órdenes/pedidos
"""
import uuid

from sqlalchemy import Column, Integer, String, DateTime, DECIMAL, Enum, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.domain.order import OrderStatus


class Order(Base):
    """
    Tabla principal de órdenes

    The order owns its items: they are inserted and deleted with it.
    """
    __tablename__ = "orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Relaciones
    customer_id = Column(Uuid, ForeignKey("customers.id"), index=True, nullable=False)

    # Fechas
    order_date = Column(DateTime(timezone=True), nullable=False, index=True)

    # Direcciones
    shipping_address = Column(String(200), nullable=False)
    billing_address = Column(String(200), nullable=False)

    # Estado (closed set, stored by value: 'Pending', 'Processing', ...)
    status = Column(
        Enum(
            OrderStatus,
            name="order_status",
            native_enum=False,
            length=20,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=OrderStatus.PENDING,
        index=True,
    )

    # Montos (always equal to the sum of item subtotals)
    total_amount = Column(DECIMAL(12, 2), nullable=False)

    # Relationships
    customer = relationship("Customer", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )


class OrderItem(Base):
    """
    Items/productos de cada orden
    """
    __tablename__ = "order_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), index=True, nullable=False)
    product_id = Column(Uuid, ForeignKey("products.id"), index=True, nullable=False)

    # Posición dentro del pedido (input order)
    position = Column(Integer, nullable=False, default=0)

    # Cantidades
    quantity = Column(Integer, nullable=False)
    # Precio capturado al crear la orden, nunca se recalcula
    unit_price = Column(DECIMAL(12, 2), nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    @property
    def subtotal(self):
        return self.unit_price * self.quantity
