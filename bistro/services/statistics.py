"""
Sales statistics per restaurant.
"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bistro.models.item import Item
from bistro.models.sale import SaleItem
from bistro.schemas.item import ItemSalesResponse


class StatisticsService:
    """Best and worst sellers, computed from recorded sale lines."""

    def __init__(self, db: Session):
        self.db = db

    def _sales_query(self, restaurant_id: UUID):
        quantity = func.coalesce(func.sum(SaleItem.quantity), 0).label("quantity")
        query = (
            select(Item, quantity)
            .outerjoin(SaleItem, SaleItem.item_id == Item.id)
            .where(Item.restaurant_id == restaurant_id)
            .group_by(Item.id)
        )
        return query, quantity

    @staticmethod
    def _to_response(item: Item, quantity: int) -> ItemSalesResponse:
        return ItemSalesResponse(
            id=item.public_id,
            name=item.name,
            price=item.price,
            description=item.description,
            quantity=int(quantity),
        )

    def most_sold(self, restaurant_id: UUID, limit: int = 5) -> List[ItemSalesResponse]:
        """
        Items ranked by units sold, best first.

        Items that were never sold are left out; ties are broken by name.
        """
        query, quantity = self._sales_query(restaurant_id)
        query = (
            query.having(quantity > 0)
            .order_by(quantity.desc(), Item.name.asc())
            .limit(limit)
        )
        rows = self.db.execute(query).all()
        return [self._to_response(item, qty) for item, qty in rows]

    def least_sold(self, restaurant_id: UUID) -> Optional[ItemSalesResponse]:
        """The item with the fewest units sold (unsold items count as zero)."""
        query, quantity = self._sales_query(restaurant_id)
        query = query.order_by(quantity.asc(), Item.name.asc()).limit(1)
        row = self.db.execute(query).first()
        if row is None:
            return None
        item, qty = row
        return self._to_response(item, qty)
