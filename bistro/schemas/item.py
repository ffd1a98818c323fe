"""
Item Pydantic schemas for API request/response models.
"""
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ItemResponse(BaseModel):
    """Response model for a single menu item."""
    id: str = Field(
        min_length=16,
        max_length=16,
        validation_alias=AliasChoices("public_id", "id"),
        description="Public ID of the item",
    )
    name: str = Field(min_length=3, max_length=255)
    price: int = Field(ge=0, description="Price in cents")
    description: Optional[str] = Field(default=None, max_length=255)

    model_config = ConfigDict(from_attributes=True)


class ItemCreate(BaseModel):
    """Request model for creating a menu item; unknown fields are rejected."""
    name: str = Field(min_length=3, max_length=255, description="Name of item")
    price: int = Field(default=0, ge=0, description="Price in cents")
    description: Optional[str] = Field(default=None, max_length=255, description="Optional description of item")

    model_config = ConfigDict(extra="forbid")


class ItemUpdate(BaseModel):
    """Request model for updating a menu item; only sent fields change."""
    name: Optional[str] = Field(default=None, min_length=3, max_length=255)
    price: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = Field(default=None, max_length=255)

    model_config = ConfigDict(extra="forbid")


class ItemSalesResponse(ItemResponse):
    """An item together with the number of units sold."""
    quantity: int = Field(ge=0, description="Units sold")


class MessageResponse(BaseModel):
    message: str
