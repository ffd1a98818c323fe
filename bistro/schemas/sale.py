"""
Sale Pydantic schemas.
"""
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SaleLineCreate(BaseModel):
    id: str = Field(min_length=16, max_length=16, description="Public ID of the item")
    quantity: int = Field(default=1, ge=1)

    model_config = ConfigDict(extra="forbid")


class SaleCreate(BaseModel):
    """Request model for recording a sale."""
    items: List[SaleLineCreate] = Field(min_length=1)

    model_config = ConfigDict(extra="forbid")


class SaleLineResponse(BaseModel):
    item_name: str
    quantity: int
    unit_price: int

    model_config = ConfigDict(from_attributes=True)


class SaleResponse(BaseModel):
    id: UUID
    total_amount: int
    items: List[SaleLineResponse]

    model_config = ConfigDict(from_attributes=True)
