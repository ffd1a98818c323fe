"""
Recording sales.
"""
import logging
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from bistro.core.errors import Forbidden, NotFound
from bistro.models.item import Item
from bistro.models.sale import Sale, SaleItem
from bistro.schemas.sale import SaleLineCreate

logger = logging.getLogger(__name__)


class SaleService:
    def __init__(self, db: Session):
        self.db = db

    def record(self, restaurant_id: UUID, lines: List[SaleLineCreate]) -> Sale:
        """
        Store a sale for a restaurant.

        Each line's price is copied from the item at the time of sale so later
        price changes do not rewrite history.

        Raises:
            NotFound: a line references an unknown item
            Forbidden: a line references another restaurant's item
        """
        public_ids = {line.id for line in lines}
        items = {
            item.public_id: item
            for item in self.db.execute(
                select(Item).where(Item.public_id.in_(public_ids))
            ).scalars()
        }

        sale = Sale(restaurant_id=restaurant_id, total_amount=0)
        for line in lines:
            item = items.get(line.id)
            if item is None:
                raise NotFound(f"Item {line.id} not found")
            if item.restaurant_id != restaurant_id:
                raise Forbidden("You don't have access to this item")

            sale.items.append(SaleItem(
                item_id=item.id,
                item_name=item.name,
                quantity=line.quantity,
                unit_price=item.price,
            ))
            sale.total_amount += item.price * line.quantity

        self.db.add(sale)
        self.db.commit()
        self.db.refresh(sale)
        logger.info(f"Recorded sale {sale.id} for restaurant {restaurant_id}")
        return sale
