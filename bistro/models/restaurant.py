import uuid
from sqlalchemy import Column, String, DateTime, Uuid, func
from sqlalchemy.orm import relationship

from bistro.db.base import Base


class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    users = relationship("User", back_populates="restaurant")
    items = relationship("Item", back_populates="restaurant")
    sales = relationship("Sale", back_populates="restaurant", cascade="all, delete-orphan")
