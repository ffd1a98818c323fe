"""
Revoked refresh tokens.

Refresh tokens are single-use: once exchanged, the old token's hash is
stored here and any later attempt to reuse it is rejected.
"""
from sqlalchemy import Column, String, DateTime, Index
from sqlalchemy.sql import func

from bistro.db.base import Base


class RevokedToken(Base):
    __tablename__ = "revoked_tokens"

    # SHA-256 of the JWT string
    token_hash = Column(String(64), primary_key=True)
    revoked_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index('idx_revoked_tokens_expires', 'expires_at'),
    )
