"""
Authentication router with register, login, logout, refresh and restaurant endpoints.
"""
import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from bistro.core.config import get_settings
from bistro.core.errors import BadRequest, NotFound, Unauthorized
from bistro.core.security import (
    InvalidTokenError,
    hash_password,
    verify_password,
    create_access_token,
    create_refresh_token,
    verify_token,
    revoke_token,
    is_token_revoked,
)
from bistro.core.deps import authenticate
from bistro.core.negotiation import NegotiatedRoute
from bistro.db.session import get_db
from bistro.models.restaurant import Restaurant
from bistro.models.user import User
from bistro.schemas.auth import (
    RestaurantCreate,
    RestaurantResponse,
    Token,
    TokenRefresh,
    UserLogin,
    UserRegister,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"], route_class=NegotiatedRoute)
settings = get_settings()


def issue_tokens(response: Response, user: User) -> Token:
    """Create a token pair and set the access token cookie."""
    access_token = create_access_token(subject=str(user.id))
    refresh_token = create_refresh_token(subject=str(user.id))

    # The JWT carries its own signature, so the cookie itself is not signed
    response.set_cookie(
        key=settings.TOKEN_COOKIE_NAME,
        value=access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_SECONDS,
        httponly=True,
        samesite="lax",
    )
    return Token(access_token=access_token, refresh_token=refresh_token)


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, response: Response, db: Session = Depends(get_db)) -> Token:
    """
    Register a new user account.
    Returns access and refresh tokens on success.
    """
    existing_user = db.query(User).filter(User.email == user_data.email).first()
    if existing_user:
        raise BadRequest("Email already registered", code="email_taken")

    new_user = User(
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    return issue_tokens(response, new_user)


@router.post("/login", response_model=Token)
def login(user_data: UserLogin, response: Response, db: Session = Depends(get_db)) -> Token:
    """
    Authenticate user and return tokens.
    The access token is also set as the `token` cookie.
    """
    user = db.query(User).filter(User.email == user_data.email).first()
    if not user or not verify_password(user_data.password, user.hashed_password):
        logger.info("Rejected login with bad credentials")
        raise Unauthorized("Invalid email or password")

    return issue_tokens(response, user)


@router.post("/refresh", response_model=Token)
def refresh(token_data: TokenRefresh, response: Response, db: Session = Depends(get_db)) -> Token:
    """
    Exchange a refresh token for a new access and refresh token.

    Refresh tokens are single-use: the old one is revoked and a new one is issued.
    """
    old_token = token_data.refresh_token
    try:
        payload = verify_token(old_token, token_type="refresh")
    except InvalidTokenError as e:
        logger.info(f"Rejected refresh token: {e}")
        raise Unauthorized("Invalid or expired refresh token") from e

    if is_token_revoked(old_token, db):
        raise Unauthorized("Refresh token has already been used. Please log in again.")

    user = db.get(User, _parse_uuid(payload["sub"]))
    if not user:
        raise Unauthorized("User not found")

    expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    revoke_token(old_token, expires_at, db)

    return issue_tokens(response, user)


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as e:
        raise Unauthorized("Invalid token payload") from e


@router.post("/logout", status_code=status.HTTP_200_OK)
def logout(response: Response, current_user: User = Depends(authenticate)) -> dict:
    """
    Logout user by clearing the token cookie.
    Clients using the Authorization header should discard their tokens.
    """
    response.delete_cookie(settings.TOKEN_COOKIE_NAME)
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(authenticate)) -> User:
    """
    Get the current authenticated user's profile.
    """
    return current_user


@router.post("/restaurant", response_model=RestaurantResponse, status_code=status.HTTP_201_CREATED)
def create_restaurant(
    restaurant_data: RestaurantCreate,
    current_user: User = Depends(authenticate),
    db: Session = Depends(get_db),
):
    """
    Create a restaurant and associate the current user with it.
    Each user can only belong to one restaurant.
    """
    if current_user.restaurant is not None:
        raise BadRequest("You already have a restaurant", code="restaurant_exists")

    new_restaurant = Restaurant(name=restaurant_data.name)
    db.add(new_restaurant)
    current_user.restaurant = new_restaurant
    db.commit()
    db.refresh(new_restaurant)

    return RestaurantResponse.model_validate(new_restaurant)


@router.get("/restaurant", response_model=RestaurantResponse)
def get_my_restaurant(current_user: User = Depends(authenticate)):
    """
    Get the current user's restaurant.
    """
    if current_user.restaurant is None:
        raise NotFound("No restaurant found. Create one first.")

    return RestaurantResponse.model_validate(current_user.restaurant)
