"""User profile endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from filmscape.database import get_db
from filmscape.schemas.user import UserProfileUpdate, UserResponse
from filmscape.utils.security import CurrentUser

router = APIRouter(prefix="/users", tags=["users"])


@router.patch("/me", response_model=UserResponse)
async def update_profile(
    current_user: CurrentUser,
    profile: UserProfileUpdate,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Update the current user's avatar or bio. Fields left out are unchanged."""
    for field, value in profile.changes().items():
        setattr(current_user, field, value)
    await db.flush()
    await db.refresh(current_user)

    return UserResponse.model_validate(current_user)
