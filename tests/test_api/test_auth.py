"""Tests for authentication and profile API endpoints."""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from filmscape.database import get_db
from filmscape.main import app
from filmscape.models.user import User
from filmscape.utils.security import (
    create_access_token,
    decode_access_token,
    hash_password,
)


@pytest.fixture
def mock_db_session():
    """Create a mock database session."""
    mock_session = AsyncMock()
    mock_session.add = MagicMock()
    mock_session.delete = AsyncMock()
    mock_session.flush = AsyncMock()
    mock_session.refresh = AsyncMock()
    return mock_session


def create_mock_user(
    id: int = 1,
    username: str = "testuser",
    email: str = "test@example.com",
    password: str = "securepassword123",
    is_active: bool = True,
) -> MagicMock:
    """Create a mock User object."""
    mock_user = MagicMock(spec=User)
    mock_user.id = id
    mock_user.username = username
    mock_user.email = email
    mock_user.hashed_password = hash_password(password)
    mock_user.profile_picture = None
    mock_user.bio = None
    mock_user.is_admin = False
    mock_user.is_active = is_active
    mock_user.created_at = datetime(2025, 1, 1, 12, 0, 0)
    mock_user.last_login = None
    return mock_user


class TestRegister:
    """Tests for user registration endpoint."""

    async def test_register_success(self, client: AsyncClient, mock_db_session: AsyncMock) -> None:
        """Test successful user registration."""
        # Mock username check - no existing user
        username_result = MagicMock()
        username_result.scalar_one_or_none.return_value = None

        # Mock email check - no existing user
        email_result = MagicMock()
        email_result.scalar_one_or_none.return_value = None

        mock_db_session.execute = AsyncMock(side_effect=[username_result, email_result])

        async def mock_refresh(user):
            user.id = 1
            user.created_at = datetime(2025, 1, 1, 12, 0, 0)

        mock_db_session.refresh = mock_refresh

        async def override_get_db():
            yield mock_db_session

        app.dependency_overrides[get_db] = override_get_db

        try:
            response = await client.post(
                "/api/auth/register",
                json={
                    "username": "newuser",
                    "email": "NewUser@Example.com",
                    "password": "securepassword123",
                },
            )

            assert response.status_code == 201
            data = response.json()
            assert data["username"] == "newuser"
            assert data["email"] == "newuser@example.com"
            assert data["is_active"] is True
            assert data["is_admin"] is False
            assert "id" in data
            assert "created_at" in data
            # Password should NOT be in response
            assert "password" not in data
            assert "hashed_password" not in data
        finally:
            app.dependency_overrides.clear()

    async def test_register_username_already_exists(
        self, client: AsyncClient, mock_db_session: AsyncMock
    ) -> None:
        """Test registration with existing username."""
        username_result = MagicMock()
        username_result.scalar_one_or_none.return_value = create_mock_user()

        mock_db_session.execute = AsyncMock(return_value=username_result)

        async def override_get_db():
            yield mock_db_session

        app.dependency_overrides[get_db] = override_get_db

        try:
            response = await client.post(
                "/api/auth/register",
                json={
                    "username": "testuser",
                    "email": "new@example.com",
                    "password": "securepassword123",
                },
            )

            assert response.status_code == 409
            assert response.json() == {
                "error": "Conflict",
                "message": "Username already registered",
            }
        finally:
            app.dependency_overrides.clear()

    async def test_register_email_already_exists(
        self, client: AsyncClient, mock_db_session: AsyncMock
    ) -> None:
        """Test registration with existing email."""
        username_result = MagicMock()
        username_result.scalar_one_or_none.return_value = None

        email_result = MagicMock()
        email_result.scalar_one_or_none.return_value = create_mock_user()

        mock_db_session.execute = AsyncMock(side_effect=[username_result, email_result])

        async def override_get_db():
            yield mock_db_session

        app.dependency_overrides[get_db] = override_get_db

        try:
            response = await client.post(
                "/api/auth/register",
                json={
                    "username": "newuser",
                    "email": "test@example.com",
                    "password": "securepassword123",
                },
            )

            assert response.status_code == 409
            assert response.json()["message"] == "Email already registered"
        finally:
            app.dependency_overrides.clear()

    @pytest.mark.parametrize(
        "payload",
        [
            {"username": "newuser", "email": "not-an-email", "password": "securepassword123"},
            {"username": "newuser", "email": "newuser@example.com", "password": "short"},
            {"username": "ab", "email": "newuser@example.com", "password": "securepassword123"},
            {"username": "user@name", "email": "newuser@example.com", "password": "longenough1"},
        ],
    )
    async def test_register_invalid_input(
        self, client: AsyncClient, mock_db_session: AsyncMock, payload: dict
    ) -> None:
        """Test that malformed registrations are rejected with a 400 envelope."""

        async def override_get_db():
            yield mock_db_session

        app.dependency_overrides[get_db] = override_get_db

        try:
            response = await client.post("/api/auth/register", json=payload)

            assert response.status_code == 400
            data = response.json()
            assert data["error"] == "Validation Error"
            assert data["message"] == "Invalid input data"
            assert isinstance(data["details"], list)
            mock_db_session.execute.assert_not_called()
        finally:
            app.dependency_overrides.clear()

    async def test_register_then_login(self, api_client: AsyncClient) -> None:
        """Test that a registered user can log in and read their profile."""
        response = await api_client.post(
            "/api/auth/register",
            json={
                "username": "User_Name-123",
                "email": "user@example.com",
                "password": "securepassword123",
            },
        )
        assert response.status_code == 201
        assert response.json()["username"] == "user_name-123"

        response = await api_client.post(
            "/api/auth/login",
            json={"username": "user_name-123", "password": "securepassword123"},
        )
        assert response.status_code == 200
        token = response.json()["access_token"]

        response = await api_client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "user@example.com"
        assert data["last_login"] is not None


class TestLogin:
    """Tests for user login endpoint."""

    async def test_login_success_with_username(
        self, client: AsyncClient, mock_db_session: AsyncMock
    ) -> None:
        """Test successful login with username."""
        mock_user = create_mock_user()

        user_result = MagicMock()
        user_result.scalar_one_or_none.return_value = mock_user
        mock_db_session.execute = AsyncMock(return_value=user_result)

        async def override_get_db():
            yield mock_db_session

        app.dependency_overrides[get_db] = override_get_db

        try:
            response = await client.post(
                "/api/auth/login",
                json={
                    "username": "testuser",
                    "password": "securepassword123",
                },
            )

            assert response.status_code == 200
            data = response.json()
            assert data["token_type"] == "bearer"

            # Verify token is valid and contains correct user id
            payload = decode_access_token(data["access_token"])
            assert payload is not None
            assert payload["sub"] == str(mock_user.id)
            assert isinstance(mock_user.last_login, datetime)
        finally:
            app.dependency_overrides.clear()

    async def test_login_invalid_password(
        self, client: AsyncClient, mock_db_session: AsyncMock
    ) -> None:
        """Test login with incorrect password."""
        user_result = MagicMock()
        user_result.scalar_one_or_none.return_value = create_mock_user()
        mock_db_session.execute = AsyncMock(return_value=user_result)

        async def override_get_db():
            yield mock_db_session

        app.dependency_overrides[get_db] = override_get_db

        try:
            response = await client.post(
                "/api/auth/login",
                json={
                    "username": "testuser",
                    "password": "wrongpassword",
                },
            )

            assert response.status_code == 401
            data = response.json()
            assert data["error"] == "Unauthorized"
            assert data["message"] == "Invalid username or password"
        finally:
            app.dependency_overrides.clear()

    async def test_login_user_not_found(
        self, client: AsyncClient, mock_db_session: AsyncMock
    ) -> None:
        """Test login with non-existent user."""
        user_result = MagicMock()
        user_result.scalar_one_or_none.return_value = None
        mock_db_session.execute = AsyncMock(return_value=user_result)

        async def override_get_db():
            yield mock_db_session

        app.dependency_overrides[get_db] = override_get_db

        try:
            response = await client.post(
                "/api/auth/login",
                json={
                    "username": "nonexistent",
                    "password": "securepassword123",
                },
            )

            assert response.status_code == 401
        finally:
            app.dependency_overrides.clear()

    async def test_login_inactive_user(
        self, client: AsyncClient, mock_db_session: AsyncMock
    ) -> None:
        """Test login with inactive user account."""
        user_result = MagicMock()
        user_result.scalar_one_or_none.return_value = create_mock_user(is_active=False)
        mock_db_session.execute = AsyncMock(return_value=user_result)

        async def override_get_db():
            yield mock_db_session

        app.dependency_overrides[get_db] = override_get_db

        try:
            response = await client.post(
                "/api/auth/login",
                json={
                    "username": "testuser",
                    "password": "securepassword123",
                },
            )

            assert response.status_code == 403
            assert response.json() == {
                "error": "Access denied",
                "message": "User account is inactive",
            }
        finally:
            app.dependency_overrides.clear()


class TestCurrentUser:
    """Tests for token-protected user endpoints."""

    async def test_me_requires_token(self, api_client: AsyncClient) -> None:
        """Test that /me without a token is rejected."""
        response = await api_client.get("/api/auth/me")
        assert response.status_code == 401

    async def test_me_rejects_token_for_missing_user(self, api_client: AsyncClient) -> None:
        """Test that a valid token for a deleted user is rejected."""
        token = create_access_token(999)
        response = await api_client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    async def test_update_profile(self, api_client: AsyncClient, user, auth_headers) -> None:
        """Test that only the fields sent are changed."""
        response = await api_client.patch(
            "/api/users/me",
            json={"bio": "Mostly horror", "profile_picture": "https://example.com/a.png"},
            headers=auth_headers(user),
        )
        assert response.status_code == 200
        assert response.json()["bio"] == "Mostly horror"

        response = await api_client.patch(
            "/api/users/me", json={"profile_picture": None}, headers=auth_headers(user)
        )
        assert response.status_code == 200
        data = response.json()
        assert data["profile_picture"] is None
        assert data["bio"] == "Mostly horror"

    async def test_inactive_user_is_forbidden(
        self, api_client: AsyncClient, make_user, auth_headers
    ) -> None:
        """Test that deactivated accounts cannot use their token."""
        inactive = await make_user("sleepy", is_active=False)
        response = await api_client.get("/api/auth/me", headers=auth_headers(inactive))
        assert response.status_code == 403


class TestJWT:
    """Tests for JWT token generation and validation."""

    def test_create_access_token(self) -> None:
        """Test JWT token creation."""
        token = create_access_token(123)

        assert isinstance(token, str)
        assert len(token) > 0

    def test_decode_access_token_valid(self) -> None:
        """Test decoding a valid JWT token."""
        token = create_access_token(42)
        payload = decode_access_token(token)

        assert payload is not None
        assert payload["sub"] == "42"
        assert "exp" in payload

    def test_decode_access_token_expired(self) -> None:
        """Test that an expired token does not decode."""
        token = create_access_token(42, expires_delta=timedelta(seconds=-1))

        assert decode_access_token(token) is None

    def test_decode_access_token_invalid(self) -> None:
        """Test decoding an invalid JWT token."""
        assert decode_access_token("invalid.token.here") is None

    def test_decode_access_token_tampered(self) -> None:
        """Test decoding a tampered JWT token."""
        token = create_access_token(1)
        tampered_token = token[:-5] + "xxxxx"

        assert decode_access_token(tampered_token) is None
