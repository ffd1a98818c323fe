"""
Sale and SaleItem models for storing sales data.
"""
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Uuid, func, Index
from sqlalchemy.orm import relationship

from bistro.db.base import Base


class Sale(Base):
    """A recorded order for a restaurant."""
    __tablename__ = "sales"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(Uuid(as_uuid=True), ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False)
    total_amount = Column(Integer, nullable=False)  # cents
    created_at = Column(DateTime, server_default=func.now())

    restaurant = relationship("Restaurant", back_populates="sales")
    items = relationship("SaleItem", back_populates="sale", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_sales_restaurant_created', 'restaurant_id', 'created_at'),
    )


class SaleItem(Base):
    """A line item within a sale."""
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sale_id = Column(Uuid(as_uuid=True), ForeignKey("sales.id", ondelete="CASCADE"), nullable=False)
    # Nulled when the menu item is deleted; item_name keeps the history readable
    item_id = Column(Integer, ForeignKey("items.id", ondelete="SET NULL"), nullable=True, index=True)
    item_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Integer, nullable=False)

    sale = relationship("Sale", back_populates="items")
    item = relationship("Item", back_populates="sale_lines")
