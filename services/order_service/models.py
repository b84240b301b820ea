import enum
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from shared.config.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class PaymentMethod(str, enum.Enum):
    COD = "COD"
    ONLINE = "ONLINE"


class PaymentStatus(str, enum.Enum):
    PENDING = "Pending"
    PAID = "Paid"
    FAILED = "Failed"


class ItemStatus(str, enum.Enum):
    PLACED = "PLACED"
    PACKAGED = "PACKAGED"
    OUT_FOR_SHIPMENT = "OUT_FOR_SHIPMENT"
    SHIPPED = "SHIPPED"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    RETURNED = "RETURNED"


class Order(Base):
    __tablename__ = "orders"
    # We use a separate schema to simulate microservice isolation
    __table_args__ = {"schema": "order_schema"}

    id = Column(Integer, primary_key=True, index=True)
    buyer_id = Column(Integer, nullable=False, index=True)
    total_amount = Column(Float, nullable=False)  # derived from items at creation
    payment_method = Column(String(16), nullable=False)
    payment_status = Column(String(16), nullable=False, default=PaymentStatus.PENDING.value)
    shipping_address = Column(JSON, nullable=False)  # snapshot, not a reference
    gateway_order_id = Column(String(64), nullable=True, index=True)
    placed_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    items = relationship(
        "OrderItem",
        back_populates="order",
        lazy="selectin",
        order_by="OrderItem.id",
        cascade="all, delete-orphan",
    )


class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = {"schema": "order_schema"}

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("order_schema.orders.id"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)
    merchant_id = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Float, nullable=False)  # unit price captured at order time
    status = Column(String(32), nullable=False, default=ItemStatus.PLACED.value)
    tracking_id = Column(String(64), nullable=True)

    order = relationship("Order", back_populates="items")
