"""
Item persistence operations.
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from bistro.core.errors import NotFound
from bistro.models.item import Item

logger = logging.getLogger(__name__)


class ItemService:
    """Create, read, update and delete menu items by public ID."""

    def __init__(self, db: Session):
        self.db = db

    def get_all_from(self, restaurant_id: UUID) -> List[Item]:
        """All items on a restaurant's menu, by name."""
        query = (
            select(Item)
            .where(Item.restaurant_id == restaurant_id)
            .order_by(Item.name.asc(), Item.id.asc())
        )
        return list(self.db.execute(query).scalars().all())

    def find(self, public_id: str) -> Optional[Item]:
        return self.db.execute(
            select(Item).where(Item.public_id == public_id)
        ).scalar_one_or_none()

    def get(self, public_id: str) -> Item:
        item = self.find(public_id)
        if item is None:
            raise NotFound("Item not found")
        return item

    def create(self, name: str, price: int, restaurant_id: UUID, description: Optional[str] = None) -> str:
        """Insert an item and return its public ID."""
        item = Item(
            name=name,
            price=price,
            description=description,
            restaurant_id=restaurant_id,
        )
        self.db.add(item)
        self.db.commit()
        logger.info(f"Created item {item.public_id} for restaurant {restaurant_id}")
        return item.public_id

    def update(self, public_id: str, fields: dict) -> str:
        item = self.get(public_id)
        for field, value in fields.items():
            setattr(item, field, value)
        self.db.commit()
        return item.public_id

    def delete(self, public_id: str) -> None:
        item = self.get(public_id)
        self.db.delete(item)
        self.db.commit()
        logger.info(f"Deleted item {public_id}")
