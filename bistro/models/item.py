"""
Menu item model.
"""
import secrets
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Uuid, func, CheckConstraint
from sqlalchemy.orm import relationship

from bistro.db.base import Base

PUBLIC_ID_LENGTH = 16


def generate_public_id() -> str:
    """Random URL-safe identifier; 12 random bytes encode to 16 characters."""
    return secrets.token_urlsafe(12)


class Item(Base):
    """A dish or product sold by the restaurant."""
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    public_id = Column(String(PUBLIC_ID_LENGTH), nullable=False, unique=True, index=True, default=generate_public_id)
    restaurant_id = Column(Uuid(as_uuid=True), ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Integer, nullable=False, default=0)  # cents
    description = Column(String(255))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    restaurant = relationship("Restaurant", back_populates="items")
    # Deleting an item keeps its sale lines and clears their item_id
    sale_lines = relationship("SaleItem", back_populates="item")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_items_price_non_negative"),
    )
