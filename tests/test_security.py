"""
Unit tests for security utilities.
"""
import time
from datetime import timedelta

import pytest

from bistro.core.security import (
    ExpiredTokenError,
    InvalidTokenError,
    hash_password,
    hash_token,
    verify_password,
    create_access_token,
    create_refresh_token,
    verify_token,
)


class TestPasswordHashing:
    """Tests for password hashing functions."""

    def test_hash_password(self):
        """Test that password hashing produces a hash."""
        password = "mysecretpassword"
        hashed = hash_password(password)

        assert hashed != password
        assert len(hashed) > 20  # bcrypt hashes are long

    def test_hash_password_different_each_time(self):
        """Test that hashing same password produces different hashes."""
        password = "mysecretpassword"

        assert hash_password(password) != hash_password(password)  # Different salts

    def test_verify_password_correct(self):
        hashed = hash_password("mysecretpassword")

        assert verify_password("mysecretpassword", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("mysecretpassword")

        assert verify_password("wrongpassword", hashed) is False


class TestJWTTokens:
    """Tests for JWT token functions."""

    def test_access_token_short_lived(self):
        """Access tokens expire 30 seconds after issue by default."""
        payload = verify_token(create_access_token(subject="user-123"))

        assert payload["type"] == "access"
        assert 0 < payload["exp"] - time.time() <= 30

    def test_verify_refresh_token(self):
        payload = verify_token(create_refresh_token(subject="user-456"), token_type="refresh")

        assert payload["sub"] == "user-456"
        assert payload["type"] == "refresh"

    def test_verify_invalid_token(self):
        with pytest.raises(InvalidTokenError):
            verify_token("invalid.token.here")

    def test_verify_access_token(self):
        payload = verify_token(create_access_token(subject="user-789"))

        assert payload["sub"] == "user-789"

    def test_verify_expired_token(self):
        token = create_access_token(subject="user-789", expires_delta=timedelta(seconds=-5))

        with pytest.raises(ExpiredTokenError):
            verify_token(token)

    def test_expired_is_distinguishable_from_invalid(self):
        with pytest.raises(InvalidTokenError) as exc_info:
            verify_token("invalid.token.here")

        assert not isinstance(exc_info.value, ExpiredTokenError)

    def test_verify_wrong_type(self):
        with pytest.raises(InvalidTokenError):
            verify_token(create_refresh_token(subject="user-789"), token_type="access")

    def test_hash_token_is_stable(self):
        assert hash_token("abc") == hash_token("abc")
        assert len(hash_token("abc")) == 64
