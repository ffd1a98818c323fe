"""
Security utilities for password hashing and JWT token handling.
"""
from datetime import datetime, timedelta, timezone
from typing import Any
import hashlib

import bcrypt
from jose import jwt, ExpiredSignatureError, JWTError
from sqlalchemy.orm import Session

from bistro.core.config import get_settings

settings = get_settings()


class InvalidTokenError(Exception):
    """Token is malformed, badly signed or carries unexpected claims."""


class ExpiredTokenError(InvalidTokenError):
    """Token signature is fine but its validity window has passed."""


def hash_token(token: str) -> str:
    """
    Hash a JWT token for storage in the revocation table.

    Only the hash is stored so a leaked table cannot be replayed.
    """
    return hashlib.sha256(token.encode()).hexdigest()


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def create_access_token(subject: str | Any, expires_delta: timedelta | None = None) -> str:
    """Create a short-lived JWT access token."""
    if expires_delta is None:
        expires_delta = timedelta(seconds=settings.ACCESS_TOKEN_EXPIRE_SECONDS)
    expire = datetime.now(timezone.utc) + expires_delta

    to_encode = {
        "sub": str(subject),
        "exp": expire,
        "type": "access"
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_refresh_token(subject: str | Any, expires_delta: timedelta | None = None) -> str:
    """Create a JWT refresh token."""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    expire = datetime.now(timezone.utc) + expires_delta

    to_encode = {
        "sub": str(subject),
        "exp": expire,
        "type": "refresh"
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str, token_type: str = "access") -> dict:
    """
    Verify a JWT and return its payload.

    Raises:
        ExpiredTokenError: the token was valid but has expired
        InvalidTokenError: any other verification failure
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError as e:
        raise ExpiredTokenError(str(e)) from e
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e

    if payload.get("type") != token_type:
        raise InvalidTokenError("Invalid token type")
    if not payload.get("sub"):
        raise InvalidTokenError("Invalid token payload")

    return payload


def is_token_revoked(token: str, db: Session) -> bool:
    """Check whether a refresh token has already been used."""
    from bistro.models.revoked_token import RevokedToken

    revoked = db.get(RevokedToken, hash_token(token))
    return revoked is not None


def revoke_token(token: str, expires_at: datetime, db: Session) -> None:
    """
    Mark a refresh token as used.

    Args:
        token: The JWT token string to revoke
        expires_at: When the token expires
        db: Database session
    """
    from bistro.models.revoked_token import RevokedToken

    token_hash_value = hash_token(token)
    if db.get(RevokedToken, token_hash_value) is None:
        db.add(RevokedToken(token_hash=token_hash_value, expires_at=expires_at))
        db.commit()
