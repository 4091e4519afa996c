"""Password hashing, JWT handling and the user dependencies built on them."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Annotated, Any

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from filmscape.config import get_settings
from filmscape.database import get_db
from filmscape.exceptions import PermissionDeniedError

if TYPE_CHECKING:
    from filmscape.models.user import User

# OAuth2 scheme for Bearer token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def hash_password(password: str) -> str:
    """Hash a plain text password using bcrypt."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a bcrypt hash."""
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Create a signed JWT whose subject is the user id.

    Args:
        user_id: ID of the authenticated user.
        expires_delta: Optional custom lifetime. Defaults to the configured expiry.

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()
    lifetime = expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "exp": datetime.now(UTC) + lifetime,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    """Decode a JWT, returning None when it is invalid or expired."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def _user_id_from_token(token: str) -> int | None:
    payload = decode_access_token(token)
    if payload is None:
        return None
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: AsyncSession = Depends(get_db),
):
    """Resolve the bearer token to a user.

    Raises:
        HTTPException 401: If the token is invalid, expired, or its user is gone
    """
    # Import here to avoid circular import
    from filmscape.models.user import User

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = _user_id_from_token(token)
    if user_id is None:
        raise credentials_exception

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise credentials_exception

    return user


async def get_current_active_user(
    current_user: Annotated["User", Depends(get_current_user)],
):
    """Get the current user, rejecting deactivated accounts.

    Raises:
        PermissionDeniedError: If the user account is inactive
    """
    if not current_user.is_active:
        raise PermissionDeniedError("User account is inactive")
    return current_user


# Type alias for use in route dependencies
CurrentUser = Annotated["User", Depends(get_current_active_user)]


async def get_current_admin_user(current_user: CurrentUser):
    """Get the current user, requiring administrator privileges.

    Raises:
        PermissionDeniedError: If the user is not an administrator
    """
    if not current_user.is_admin:
        raise PermissionDeniedError("Administrator privileges are required")
    return current_user


AdminUser = Annotated["User", Depends(get_current_admin_user)]
