"""
Auth-related Pydantic schemas for request/response validation.
"""
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRegister(BaseModel):
    """Schema for user registration request."""
    email: EmailStr
    password: str = Field(min_length=8)


class UserLogin(BaseModel):
    """Schema for user login request."""
    email: EmailStr
    password: str


class Token(BaseModel):
    """Schema for token response."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenRefresh(BaseModel):
    """Schema for token refresh request."""
    refresh_token: str


class RestaurantCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class RestaurantResponse(BaseModel):
    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    """Schema for user response (without password)."""
    id: UUID
    email: str
    restaurant: Optional[RestaurantResponse] = None

    model_config = ConfigDict(from_attributes=True)
