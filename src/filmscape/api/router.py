"""Main API router aggregation."""

from fastapi import APIRouter

from filmscape.api.auth import router as auth_router
from filmscape.api.movies import router as movies_router
from filmscape.api.reviews import router as reviews_router
from filmscape.api.users import router as users_router
from filmscape.api.watchlist import router as watchlist_router

# Main API router
api_router = APIRouter(prefix="/api")

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(movies_router)
api_router.include_router(reviews_router)
api_router.include_router(watchlist_router)
