"""
Tests for authentication endpoints.
"""
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bistro.models.user import User


class TestRegister:
    """Tests for POST /auth/register."""

    def test_register_success(self, client: TestClient, db: Session):
        """Test successful user registration."""
        response = client.post(
            "/auth/register",
            json={"email": "newuser@example.com", "password": "securepassword123"}
        )

        assert response.status_code == 201
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["token_type"] == "bearer"

        db.expire_all()
        user = db.query(User).filter(User.email == "newuser@example.com").first()
        assert user is not None
        assert user.restaurant is None

    def test_register_duplicate_email(self, client: TestClient, test_user: User):
        """Test registration with existing email fails."""
        response = client.post(
            "/auth/register",
            json={"email": test_user.email, "password": "somepassword123"}
        )

        assert response.status_code == 400
        assert "already registered" in response.json()["detail"].lower()
        assert response.json()["code"] == "email_taken"

    def test_register_invalid_email(self, client: TestClient):
        """Test registration with invalid email fails validation."""
        response = client.post(
            "/auth/register",
            json={"email": "not-an-email", "password": "securepassword123"}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"


class TestLogin:
    """Tests for POST /auth/login."""

    def test_login_success_sets_cookie(self, client: TestClient, test_user: User):
        """Login returns tokens and sets the access token cookie."""
        response = client.post(
            "/auth/login",
            json={"email": "testuser@example.com", "password": "testpassword123"}
        )

        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert response.cookies.get("token") == data["access_token"]

    def test_cookie_authenticates_follow_up_requests(self, client: TestClient, test_user: User):
        """The cookie alone is enough to call authenticated endpoints."""
        client.post(
            "/auth/login",
            json={"email": "testuser@example.com", "password": "testpassword123"}
        )

        response = client.get("/auth/me")

        assert response.status_code == 200
        assert response.json()["email"] == test_user.email

    def test_login_with_yaml_body(self, client: TestClient, test_user: User):
        """YAML bodies are accepted wherever JSON is."""
        response = client.post(
            "/auth/login",
            content=b"email: testuser@example.com\npassword: testpassword123\n",
            headers={"Content-Type": "application/yaml"},
        )

        assert response.status_code == 200

    def test_login_wrong_password(self, client: TestClient, test_user: User):
        """Test login with wrong password fails."""
        response = client.post(
            "/auth/login",
            json={"email": "testuser@example.com", "password": "wrongpassword"}
        )

        assert response.status_code == 401
        assert "invalid" in response.json()["detail"].lower()
        assert response.json()["code"] == "unauthorized"

    def test_login_nonexistent_user(self, client: TestClient):
        """Test login with nonexistent user fails."""
        response = client.post(
            "/auth/login",
            json={"email": "nobody@example.com", "password": "somepassword"}
        )

        assert response.status_code == 401


class TestRefresh:
    """Tests for POST /auth/refresh."""

    def _login(self, client: TestClient) -> dict:
        return client.post(
            "/auth/login",
            json={"email": "testuser@example.com", "password": "testpassword123"}
        ).json()

    def test_refresh_success(self, client: TestClient, test_user: User):
        """Test successful token refresh."""
        refresh_token = self._login(client)["refresh_token"]

        response = client.post("/auth/refresh", json={"refresh_token": refresh_token})

        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data

    def test_refresh_token_is_single_use(self, client: TestClient, test_user: User):
        """A refresh token cannot be exchanged twice."""
        refresh_token = self._login(client)["refresh_token"]

        first = client.post("/auth/refresh", json={"refresh_token": refresh_token})
        second = client.post("/auth/refresh", json={"refresh_token": refresh_token})

        assert first.status_code == 200
        assert second.status_code == 401
        assert "already been used" in second.json()["detail"]
        assert second.json()["code"] == "unauthorized"

    def test_refresh_rejects_access_token(self, client: TestClient, test_user: User):
        """Access tokens cannot be used as refresh tokens."""
        access_token = self._login(client)["access_token"]

        response = client.post("/auth/refresh", json={"refresh_token": access_token})

        assert response.status_code == 401

    def test_refresh_invalid_token(self, client: TestClient):
        """Test refresh with invalid token fails."""
        response = client.post(
            "/auth/refresh",
            json={"refresh_token": "invalid.token.here"}
        )

        assert response.status_code == 401
        assert set(response.json()) == {"detail", "code"}


class TestMe:
    """Tests for GET /auth/me."""

    def test_me_authenticated(self, client: TestClient, auth_headers: dict, test_user: User):
        """Test getting current user info."""
        response = client.get("/auth/me", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == test_user.email
        assert data["restaurant"] is None

    def test_me_unauthenticated(self, client: TestClient):
        """Test accessing /me without auth fails."""
        response = client.get("/auth/me")

        assert response.status_code == 401


class TestLogout:
    """Tests for POST /auth/logout."""

    def test_logout_success(self, client: TestClient, auth_headers: dict):
        """Test successful logout."""
        response = client.post("/auth/logout", headers=auth_headers)

        assert response.status_code == 200
        assert "logged out" in response.json()["message"].lower()


class TestRestaurant:
    """Tests for /auth/restaurant."""

    def test_create_restaurant(self, client: TestClient, db: Session, auth_headers: dict, test_user: User):
        response = client.post("/auth/restaurant", headers=auth_headers, json={"name": "Chez Test"})

        assert response.status_code == 201
        assert response.json()["name"] == "Chez Test"

        db.refresh(test_user)
        assert test_user.restaurant is not None
        assert str(test_user.restaurant.id) == response.json()["id"]

    def test_create_second_restaurant_fails(self, client: TestClient, auth_headers_with_restaurant: dict):
        response = client.post(
            "/auth/restaurant",
            headers=auth_headers_with_restaurant,
            json={"name": "Another One"},
        )

        assert response.status_code == 400
        assert "already have a restaurant" in response.json()["detail"]
        assert response.json()["code"] == "restaurant_exists"

    def test_get_restaurant(self, client: TestClient, auth_headers_with_restaurant: dict):
        response = client.get("/auth/restaurant", headers=auth_headers_with_restaurant)

        assert response.status_code == 200
        assert response.json()["name"] == "Test Restaurant"

    def test_get_restaurant_missing(self, client: TestClient, auth_headers: dict):
        response = client.get("/auth/restaurant", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_missing_restaurant_error_body(self, client: TestClient, auth_headers: dict):
        """Auth errors use the same typed body as every other error."""
        response = client.get("/auth/restaurant", headers=auth_headers)

        assert response.json() == {
            "detail": "No restaurant found. Create one first.",
            "code": "not_found",
        }
