"""OMDb (Open Movie Database) API client service."""

import logging
from typing import Any

from filmscape.config import get_settings
from filmscape.schemas.external import OMDB_MISSING, OMDbMovieDetails, OMDbSearchResponse
from filmscape.services.base import APIError, BaseAPIClient, NotFoundError

logger = logging.getLogger(__name__)


class OMDbClient(BaseAPIClient):
    """Client for the OMDb API.

    OMDb exposes a single endpoint whose behaviour is selected by query
    parameters (``i`` for IMDb id lookup, ``t`` for title lookup, ``s`` for
    search). The API key travels as the ``apikey`` parameter, and failures
    come back as HTTP 200 with ``"Response": "False"``.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the OMDb client.

        Args:
            api_key: OMDb API key. If not provided, uses settings.
            base_url: OMDb base URL. If not provided, uses settings.
            timeout: Request timeout in seconds.
        """
        settings = get_settings()
        self._api_key = api_key or settings.omdb_api_key
        self.placeholder_poster = settings.placeholder_poster
        base = base_url or settings.omdb_base_url

        if not self._api_key:
            raise ValueError("OMDb API key is required")

        super().__init__(base_url=base, timeout=timeout)

    @property
    def default_headers(self) -> dict[str, str]:
        """Return default headers."""
        return {"Accept": "application/json"}

    async def _query(self, params: dict[str, Any]) -> dict[str, Any]:
        """Call the OMDb endpoint and unwrap its in-body error convention."""
        data = await self.get("/", params={"apikey": self._api_key, **params})

        if data.get("Response") == "False":
            error = data.get("Error") or "Unknown OMDb error"
            if "not found" in error.lower():
                raise NotFoundError(error)
            logger.warning("OMDb error for %s: %s", params, error)
            raise APIError(f"OMDb API error: {error}", status_code=502)

        return data

    async def get_movie(self, imdb_id: str, plot: str = "full") -> OMDbMovieDetails:
        """Get detailed information about a movie by IMDb id.

        Args:
            imdb_id: IMDb ID, e.g. "tt0111161".
            plot: "short" or "full" plot text.

        Returns:
            Detailed movie information.

        Raises:
            NotFoundError: If the movie is not found.
        """
        data = await self._query({"i": imdb_id, "plot": plot})
        return OMDbMovieDetails.model_validate(data)

    async def get_movie_by_title(
        self,
        title: str,
        year: int | None = None,
        plot: str = "full",
    ) -> OMDbMovieDetails:
        """Get detailed information about the best title match.

        Raises:
            NotFoundError: If no movie matches.
        """
        params: dict[str, Any] = {"t": title, "plot": plot}
        if year is not None:
            params["y"] = year
        data = await self._query(params)
        return OMDbMovieDetails.model_validate(data)

    async def search_movies(
        self,
        query: str,
        page: int = 1,
        year: int | None = None,
    ) -> OMDbSearchResponse:
        """Search for movies by title.

        A search with no hits is returned as an empty response rather than
        an error.

        Args:
            query: Search query string.
            page: Page number (1-based, 10 results per page).
            year: Filter by release year.

        Returns:
            Search response containing movie results.
        """
        params: dict[str, Any] = {"s": query, "type": "movie", "page": page}
        if year is not None:
            params["y"] = year

        try:
            data = await self._query(params)
        except NotFoundError:
            return OMDbSearchResponse()
        return OMDbSearchResponse.model_validate(data)

    def get_poster_url(self, poster: str | None) -> str:
        """Return the poster URL, or the placeholder when OMDb has none."""
        if not poster or poster == OMDB_MISSING:
            return self.placeholder_poster
        return poster


async def get_omdb_client() -> OMDbClient:
    """Factory function to create an OMDb client.

    Can be used as a FastAPI dependency.

    Raises:
        APIError 503: If no OMDb API key is configured
    """
    if not get_settings().omdb_api_key:
        raise APIError("OMDb API is not configured", status_code=503)
    return OMDbClient()


async def get_optional_omdb_client() -> OMDbClient | None:
    """Like ``get_omdb_client`` but returns None when no API key is configured."""
    if not get_settings().omdb_api_key:
        return None
    return OMDbClient()
