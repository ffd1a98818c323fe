"""
SQLAlchemy models for Bistro.
"""
from bistro.models.user import User
from bistro.models.restaurant import Restaurant
from bistro.models.item import Item
from bistro.models.sale import Sale, SaleItem
from bistro.models.revoked_token import RevokedToken


__all__ = [
    "User",
    "Restaurant",
    "Item",
    "Sale",
    "SaleItem",
    "RevokedToken",
]
