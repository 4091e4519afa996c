"""Business logic and external API clients."""

from filmscape.services.base import (
    APIError,
    BaseAPIClient,
    NotFoundError,
    RateLimitError,
)
from filmscape.services.omdb import OMDbClient, get_omdb_client, get_optional_omdb_client

__all__ = [
    "APIError",
    "BaseAPIClient",
    "NotFoundError",
    "RateLimitError",
    "OMDbClient",
    "get_omdb_client",
    "get_optional_omdb_client",
]
