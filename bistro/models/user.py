import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship

from bistro.db.base import Base


class User(Base):
    """An account that can sign in; optionally operates one restaurant."""
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String, nullable=False)
    restaurant_id = Column(Uuid(as_uuid=True), ForeignKey("restaurants.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    restaurant = relationship("Restaurant", back_populates="users", lazy="joined")
