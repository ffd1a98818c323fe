"""
Authentication dependencies.

``authenticate`` verifies the access token sent with the request and loads
the user it names. ``authenticate_with_restaurant`` builds on it and also
requires the user to operate a restaurant. Routes opt in per endpoint with
``Depends``.
"""
import logging
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bistro.core.config import get_settings
from bistro.core.errors import Forbidden, TokenExpired, Unauthorized
from bistro.core.security import ExpiredTokenError, InvalidTokenError, verify_token
from bistro.db.session import get_db
from bistro.models.user import User

logger = logging.getLogger(__name__)
settings = get_settings()

bearer_scheme = HTTPBearer(auto_error=False)
cookie_scheme = APIKeyCookie(name=settings.TOKEN_COOKIE_NAME, auto_error=False)


def get_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    cookie_token: str | None = Depends(cookie_scheme),
) -> str:
    """Token from the Authorization header, falling back to the token cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    if cookie_token:
        return cookie_token
    raise Unauthorized("No authorization token was found in the request")


def authenticate(
    request: Request,
    token: str = Depends(get_token),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the request's access token to a user."""
    try:
        payload = verify_token(token, token_type="access")
    except ExpiredTokenError:
        logger.info("Rejected expired token", extra={"path": request.url.path})
        raise TokenExpired()
    except InvalidTokenError as e:
        logger.info(f"Rejected invalid token: {e}", extra={"path": request.url.path})
        raise Unauthorized("Authorization token is invalid")

    try:
        user_id = UUID(payload["sub"])
    except ValueError:
        raise Unauthorized("Authorization token is invalid")

    user = db.get(User, user_id)
    if user is None:
        raise Unauthorized("User not found")

    return user


def authenticate_with_restaurant(current_user: User = Depends(authenticate)) -> User:
    """Like ``authenticate``, but the user must be associated with a restaurant."""
    if current_user.restaurant is None:
        raise Forbidden("You are not associated with any restaurant")
    return current_user
