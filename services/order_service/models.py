from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from shared.config.database import Base
from .status import PENDING


def _utcnow():
    return datetime.now(timezone.utc)


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("user_id", "idempotency_key", name="uq_orders_user_idempotency_key"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    total = Column(Numeric(12, 2), nullable=False) # sum of item price * qty at creation
    status = Column(String(16), nullable=False, default=PENDING, index=True) # roll-up of fulfillments
    payment_ref = Column(String(64), unique=True, nullable=True)
    idempotency_key = Column(String(128), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.id",
    )
    fulfillments = relationship(
        "OrderFulfillment",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderFulfillment.id",
    )


class OrderItem(Base):
    """A cart line frozen at checkout. Never updated after insert."""
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("agro_products.id", ondelete="CASCADE"), nullable=False, index=True)
    provider_id = Column(Integer, nullable=True, index=True) # seller at purchase time
    qty = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False) # unit price at purchase time
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    order = relationship("Order", back_populates="items")
    product = relationship("Product", lazy="selectin")

    @property
    def name(self):
        return self.product.name if self.product else None

    @property
    def image_url(self):
        return self.product.image_url if self.product else None

    @property
    def company(self):
        return self.product.company if self.product else None


class OrderFulfillment(Base):
    """One seller's share of an order and how far that seller has taken it."""
    __tablename__ = "order_fulfillments"
    __table_args__ = (
        UniqueConstraint("order_id", "provider_id", name="uq_order_fulfillments_order_provider"),
    )

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    provider_id = Column(Integer, nullable=True, index=True)
    status = Column(String(16), nullable=False, default=PENDING)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    order = relationship("Order", back_populates="fulfillments")
