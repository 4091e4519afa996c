"""Authentication API endpoints."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from filmscape.database import get_db
from filmscape.exceptions import ConflictError, PermissionDeniedError
from filmscape.models.user import User
from filmscape.schemas.user import Token, UserCreate, UserLogin, UserResponse
from filmscape.utils.security import (
    CurrentUser,
    create_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Register a new user.

    Creates a new user account with the provided username, email, and password.
    The password is securely hashed before storage.

    Raises:
        ConflictError 409: If username or email already exists
    """
    username_query = select(User).where(User.username == user_data.username)
    if (await db.execute(username_query)).scalar_one_or_none():
        raise ConflictError("Username already registered")

    email = user_data.email.lower()
    email_query = select(User).where(User.email == email)
    if (await db.execute(email_query)).scalar_one_or_none():
        raise ConflictError("Email already registered")

    new_user = User(
        username=user_data.username,
        email=email,
        hashed_password=hash_password(user_data.password),
        created_at=datetime.now(UTC),
        is_active=True,
        is_admin=False,
        is_verified=False,
    )
    db.add(new_user)
    await db.flush()
    await db.refresh(new_user)
    logger.info("Registered user %s (%s)", new_user.id, new_user.username)

    return UserResponse.model_validate(new_user)


@router.post("/login", response_model=Token)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db),
) -> Token:
    """Authenticate user and return JWT token.

    Accepts either username or email in the username field.

    Raises:
        HTTPException 401: If credentials are invalid
        PermissionDeniedError 403: If user account is inactive
    """
    login_name = credentials.username.lower()
    query = select(User).where(or_(User.username == login_name, User.email == login_name))
    user = (await db.execute(query)).scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=401,
            detail="Invalid username or password",
        )

    if not user.is_active:
        raise PermissionDeniedError("User account is inactive")

    user.last_login = datetime.now(UTC)
    await db.flush()

    return Token(access_token=create_access_token(user.id), token_type="bearer")


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: CurrentUser) -> UserResponse:
    """Get the current authenticated user's information.

    Requires a valid JWT token in the Authorization header.
    """
    return UserResponse.model_validate(current_user)
