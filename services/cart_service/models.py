from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.sql import func

from shared.config.database import Base


class CartLine(Base):
    __tablename__ = "cart"
    __table_args__ = (
        # One cart entry per buyer and product
        UniqueConstraint("user_id", "product_id", name="uq_cart_user_product"),
        CheckConstraint("qty > 0", name="ck_cart_qty_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("agro_products.id", ondelete="CASCADE"), nullable=False, index=True)
    qty = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
