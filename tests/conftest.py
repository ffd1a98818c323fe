"""
Test configuration and fixtures.
"""
import os
import pytest
from typing import Generator
from sqlalchemy.orm import Session
from fastapi.testclient import TestClient

# Configure the app before importing it
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-validation"
os.environ["ENVIRONMENT"] = "development"

from bistro.main import app
from bistro.db.base import Base
from bistro.db.session import engine, SessionLocal, get_db
from bistro.models.item import Item
from bistro.models.restaurant import Restaurant
from bistro.models.user import User
from bistro.core.security import create_access_token, hash_password


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh in-memory database for every test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database session override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


def make_user(db: Session, email: str, restaurant: Restaurant | None = None) -> User:
    user = User(
        email=email,
        hashed_password=hash_password("testpassword123"),
        restaurant=restaurant,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=str(user.id))}"}


@pytest.fixture
def test_user(db: Session) -> User:
    """A user without a restaurant."""
    return make_user(db, "testuser@example.com")


@pytest.fixture
def test_user_with_restaurant(db: Session) -> tuple[User, Restaurant]:
    """A user operating a restaurant."""
    restaurant = Restaurant(name="Test Restaurant")
    db.add(restaurant)
    db.commit()
    user = make_user(db, "restaurant_owner@example.com", restaurant)
    return user, restaurant


@pytest.fixture
def other_restaurant(db: Session) -> tuple[User, Restaurant]:
    """A second, unrelated restaurant and its operator."""
    restaurant = Restaurant(name="Other Restaurant")
    db.add(restaurant)
    db.commit()
    user = make_user(db, "competitor@example.com", restaurant)
    return user, restaurant


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Auth headers for the user without a restaurant."""
    return bearer(test_user)


@pytest.fixture
def auth_headers_with_restaurant(test_user_with_restaurant: tuple[User, Restaurant]) -> dict:
    """Auth headers for the restaurant operator."""
    user, _ = test_user_with_restaurant
    return bearer(user)


@pytest.fixture
def sample_items(db: Session, test_user_with_restaurant) -> list[Item]:
    """Three items on the test restaurant's menu."""
    _, restaurant = test_user_with_restaurant
    items = [
        Item(restaurant_id=restaurant.id, name="Caesar Salad", price=1200, description="Romaine, parmesan"),
        Item(restaurant_id=restaurant.id, name="Mushroom Soup", price=800),
        Item(restaurant_id=restaurant.id, name="Ribeye Steak", price=3500),
    ]
    db.add_all(items)
    db.commit()
    for item in items:
        db.refresh(item)
    return items


@pytest.fixture
def foreign_item(db: Session, other_restaurant) -> Item:
    """An item that belongs to the other restaurant."""
    _, restaurant = other_restaurant
    item = Item(restaurant_id=restaurant.id, name="Secret Recipe", price=999)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


@pytest.fixture
def other_auth_headers(other_restaurant) -> dict:
    user, _ = other_restaurant
    return bearer(user)
