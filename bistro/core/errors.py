"""
Typed HTTP errors raised by handlers and dependencies.

Every error carries an explicit status code, a human readable message
(``detail``) and a short machine readable ``code``.
"""
from fastapi import HTTPException, status


class APIError(HTTPException):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "api_error"

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None):
        super().__init__(status_code=status_code or self.status_code, detail=message)
        if code:
            self.code = code

    def to_response(self) -> dict:
        return {"detail": self.detail, "code": self.code}


class BadRequest(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "bad_request"


class MalformedBody(BadRequest):
    """Request body could not be decoded for its declared content type."""
    code = "malformed_body"


class Unauthorized(APIError):
    """Missing, malformed or otherwise invalid credentials."""
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"


class Forbidden(APIError):
    """Authenticated, but not allowed to touch the resource."""
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class TokenExpired(Forbidden):
    code = "token_expired"

    def __init__(self, message: str = "Authorization token expired"):
        super().__init__(message)


class NotFound(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
