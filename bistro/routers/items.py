"""
Menu items router.

Every endpoint requires a user associated with a restaurant and only ever
exposes that restaurant's items.
"""
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from bistro.core.deps import authenticate_with_restaurant
from bistro.core.errors import Forbidden
from bistro.core.negotiation import NegotiatedRoute
from bistro.db.session import get_db
from bistro.models.item import Item
from bistro.models.user import User
from bistro.schemas.item import (
    ItemCreate,
    ItemResponse,
    ItemSalesResponse,
    ItemUpdate,
    MessageResponse,
)
from bistro.services.items import ItemService
from bistro.services.statistics import StatisticsService

router = APIRouter(prefix="/items", tags=["restaurant", "item"], route_class=NegotiatedRoute)

ItemId = Annotated[str, Path(min_length=16, max_length=16, description="Public ID of the item")]


def get_owned_item(service: ItemService, item_id: str, user: User) -> Item:
    """Fetch an item, raising 403 when it belongs to another restaurant."""
    item = service.get(item_id)
    if item.restaurant_id != user.restaurant.id:
        raise Forbidden("You don't have access to this item")
    return item


@router.get("", response_model=List[ItemResponse], summary="Get menu from current restaurant")
def list_items(
    db: Session = Depends(get_db),
    current_user: User = Depends(authenticate_with_restaurant),
):
    """List of items in the menu."""
    items = ItemService(db).get_all_from(current_user.restaurant.id)
    return [ItemResponse.model_validate(item) for item in items]


# Declared before /{item_id} so the literal paths are matched first
@router.get(
    "/best-seller",
    response_model=List[ItemSalesResponse],
    summary="Get most sold products",
    tags=["info"],
)
def best_seller(
    db: Session = Depends(get_db),
    current_user: User = Depends(authenticate_with_restaurant),
):
    return StatisticsService(db).most_sold(current_user.restaurant.id)


@router.get(
    "/worst-seller",
    response_model=Optional[ItemSalesResponse],
    summary="Get least sold product",
    tags=["info"],
)
def worst_seller(
    db: Session = Depends(get_db),
    current_user: User = Depends(authenticate_with_restaurant),
):
    return StatisticsService(db).least_sold(current_user.restaurant.id)


@router.get("/{item_id}", response_model=ItemResponse, summary="Get an item")
def get_item(
    item_id: ItemId,
    db: Session = Depends(get_db),
    current_user: User = Depends(authenticate_with_restaurant),
):
    item = get_owned_item(ItemService(db), item_id, current_user)
    return ItemResponse.model_validate(item)


@router.post(
    "",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add an item to the menu",
)
def create_item(
    item_data: ItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authenticate_with_restaurant),
):
    """
    Create a menu item.

    The response is read back from the database, so it reflects what was
    stored rather than echoing the request.
    """
    service = ItemService(db)
    item_id = service.create(
        name=item_data.name,
        price=item_data.price,
        description=item_data.description,
        restaurant_id=current_user.restaurant.id,
    )
    return ItemResponse.model_validate(service.get(item_id))


@router.patch("/{item_id}", response_model=ItemResponse, summary="Update an item")
def update_item(
    update_data: ItemUpdate,
    item_id: ItemId,
    db: Session = Depends(get_db),
    current_user: User = Depends(authenticate_with_restaurant),
):
    """Change name, price or description. Omitted fields are left alone."""
    service = ItemService(db)
    get_owned_item(service, item_id, current_user)
    fields = update_data.model_dump(exclude_unset=True)
    # name and price are NOT NULL; an explicit null leaves them unchanged
    fields = {k: v for k, v in fields.items() if v is not None or k == "description"}
    service.update(item_id, fields)
    return ItemResponse.model_validate(service.get(item_id))


@router.delete("/{item_id}", response_model=MessageResponse, summary="Delete an item")
def delete_item(
    item_id: ItemId,
    db: Session = Depends(get_db),
    current_user: User = Depends(authenticate_with_restaurant),
):
    service = ItemService(db)
    get_owned_item(service, item_id, current_user)
    service.delete(item_id)
    return {"message": "Item deleted successfully"}
