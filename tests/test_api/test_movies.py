"""Tests for movie API endpoints."""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from filmscape.main import app
from filmscape.models.user import User
from filmscape.schemas.external import OMDbMovieDetails, OMDbSearchResponse
from filmscape.services.base import APIError, NotFoundError
from filmscape.services.omdb import OMDbClient, get_omdb_client, get_optional_omdb_client
from filmscape.utils.security import get_current_active_user

INCEPTION = "tt1375666"

# Sample test data
SAMPLE_SEARCH_RESPONSE = OMDbSearchResponse.model_validate(
    {
        "Search": [
            {
                "Title": "Inception",
                "Year": "2010",
                "imdbID": INCEPTION,
                "Type": "movie",
                "Poster": "https://m.media-amazon.com/images/M/inception.jpg",
            },
            {
                "Title": "Inception: The Cobol Job",
                "Year": "2010",
                "imdbID": "tt5295894",
                "Type": "movie",
                "Poster": "N/A",
            },
        ],
        "totalResults": "2",
        "Response": "True",
    }
)

SAMPLE_MOVIE_DETAILS = OMDbMovieDetails.model_validate(
    {
        "Title": "Inception",
        "Year": "2010",
        "Rated": "PG-13",
        "Released": "16 Jul 2010",
        "Runtime": "148 min",
        "Genre": "Action, Adventure, Sci-Fi",
        "Director": "Christopher Nolan",
        "Writer": "Christopher Nolan",
        "Actors": "Leonardo DiCaprio, Joseph Gordon-Levitt, Elliot Page",
        "Plot": "A thief who steals corporate secrets through dream-sharing technology...",
        "Language": "English, Japanese, French",
        "Country": "United States, United Kingdom",
        "Awards": "Won 4 Oscars. 159 wins & 220 nominations total",
        "Poster": "https://m.media-amazon.com/images/M/inception.jpg",
        "imdbRating": "8.8",
        "imdbVotes": "2,600,000",
        "imdbID": INCEPTION,
        "Type": "movie",
        "DVD": "N/A",
        "BoxOffice": "$292,587,330",
        "Production": "N/A",
        "Website": "N/A",
        "Response": "True",
    }
)


@pytest.fixture
def mock_omdb_client():
    """Create a mock OMDb client."""
    mock_client = MagicMock(spec=OMDbClient)
    mock_client.search_movies = AsyncMock(return_value=SAMPLE_SEARCH_RESPONSE)
    mock_client.get_movie = AsyncMock(return_value=SAMPLE_MOVIE_DETAILS)
    mock_client.get_movie_by_title = AsyncMock(return_value=SAMPLE_MOVIE_DETAILS)
    mock_client.get_poster_url.side_effect = lambda poster: (
        poster if poster and poster != "N/A" else "/placeholder-movie.jpg"
    )
    mock_client.close = AsyncMock()
    return mock_client


@pytest.fixture
def mock_admin_user():
    """Create a mock administrator."""
    mock_user = MagicMock(spec=User)
    mock_user.id = 1
    mock_user.username = "admin"
    mock_user.is_active = True
    mock_user.is_admin = True
    mock_user.created_at = datetime(2025, 1, 1, 12, 0, 0)
    return mock_user


class TestMovieSearch:
    """Tests for the OMDb search proxy."""

    async def test_search_movies_success(
        self, client: AsyncClient, mock_omdb_client: MagicMock
    ) -> None:
        """Test successful movie search."""
        app.dependency_overrides[get_omdb_client] = lambda: mock_omdb_client

        try:
            response = await client.get("/api/movies/search?query=Inception")

            assert response.status_code == 200
            data = response.json()
            assert data["page"] == 1
            assert data["total_results"] == 2
            assert data["results"][0]["imdb_id"] == INCEPTION
            assert data["results"][0]["poster_url"].endswith("inception.jpg")
            assert data["results"][1]["poster_url"] == "/placeholder-movie.jpg"
            mock_omdb_client.close.assert_awaited_once()
        finally:
            app.dependency_overrides.clear()

    async def test_search_movies_with_year(
        self, client: AsyncClient, mock_omdb_client: MagicMock
    ) -> None:
        """Test movie search with year filter."""
        app.dependency_overrides[get_omdb_client] = lambda: mock_omdb_client

        try:
            response = await client.get("/api/movies/search?query=Inception&year=2010")

            assert response.status_code == 200
            mock_omdb_client.search_movies.assert_called_once_with(
                query="Inception", page=1, year=2010
            )
        finally:
            app.dependency_overrides.clear()

    async def test_search_movies_missing_query(
        self, client: AsyncClient, mock_omdb_client: MagicMock
    ) -> None:
        """Test that the query parameter is required."""
        # The client dependency is resolved before query validation
        app.dependency_overrides[get_omdb_client] = lambda: mock_omdb_client

        try:
            response = await client.get("/api/movies/search")

            assert response.status_code == 400
            assert response.json()["error"] == "Validation Error"
            mock_omdb_client.search_movies.assert_not_called()
        finally:
            app.dependency_overrides.clear()

    async def test_search_without_api_key(self, client: AsyncClient) -> None:
        """Test that search reports the missing OMDb configuration."""
        response = await client.get("/api/movies/search?query=Inception")

        assert response.status_code == 503
        assert response.json()["message"] == "OMDb API is not configured"

    async def test_search_upstream_failure(
        self, client: AsyncClient, mock_omdb_client: MagicMock
    ) -> None:
        """Test that OMDb failures are reported through the error envelope."""
        mock_omdb_client.search_movies.side_effect = APIError("OMDb API error: boom", 502)
        app.dependency_overrides[get_omdb_client] = lambda: mock_omdb_client

        try:
            response = await client.get("/api/movies/search?query=Inception")

            assert response.status_code == 502
            assert response.json() == {
                "error": "External API Error",
                "message": "OMDb API error: boom",
            }
        finally:
            app.dependency_overrides.clear()


class TestGetMovie:
    """Tests for movie lookup with lazy creation."""

    async def test_get_creates_placeholder_once(self, api_client: AsyncClient) -> None:
        """Test that repeated lookups return the same placeholder record."""
        first = await api_client.get(f"/api/movies/{INCEPTION}")
        second = await api_client.get(f"/api/movies/{INCEPTION}")

        assert first.status_code == 200
        data = first.json()
        assert data["title"] == f"Movie {INCEPTION}"
        assert data["year"] == datetime.now().year
        assert data["poster"] == "/placeholder-movie.jpg"
        assert data["imdb_rating"] == 0.0
        assert data["enriched_at"] is None
        assert second.json()["id"] == data["id"]

    async def test_get_enriches_on_first_view(
        self, api_client: AsyncClient, mock_omdb_client: MagicMock
    ) -> None:
        """Test that a configured OMDb client fills in a new movie."""
        app.dependency_overrides[get_optional_omdb_client] = lambda: mock_omdb_client

        response = await api_client.get(f"/api/movies/{INCEPTION}")

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Inception"
        assert data["year"] == 2010
        assert data["imdb_rating"] == 8.8
        assert data["director"] == "Christopher Nolan"
        assert data["dvd"] is None
        assert data["enriched_at"] is not None

        # Already enriched: no second OMDb call
        await api_client.get(f"/api/movies/{INCEPTION}")
        mock_omdb_client.get_movie.assert_awaited_once_with(INCEPTION)

    async def test_get_survives_omdb_failure(
        self, api_client: AsyncClient, mock_omdb_client: MagicMock
    ) -> None:
        """Test that an OMDb outage still returns the local record."""
        mock_omdb_client.get_movie.side_effect = APIError("Request timed out")
        app.dependency_overrides[get_optional_omdb_client] = lambda: mock_omdb_client

        response = await api_client.get(f"/api/movies/{INCEPTION}")

        assert response.status_code == 200
        assert response.json()["title"] == f"Movie {INCEPTION}"

    async def test_get_invalid_imdb_id(self, api_client: AsyncClient) -> None:
        """Test that malformed ids are rejected before touching the database."""
        response = await api_client.get("/api/movies/tt12")
        assert response.status_code == 400


class TestListMovies:
    """Tests for the local catalogue listing."""

    async def test_search_by_title(
        self, api_client: AsyncClient, admin_user: User, auth_headers
    ) -> None:
        """Test case-insensitive matching on title."""
        for imdb_id, title in (
            ("tt0111161", "The Shawshank Redemption"),
            ("tt0068646", "The Godfather"),
            ("tt0071562", "The Godfather Part II"),
        ):
            response = await api_client.post(
                "/api/movies",
                json={"imdb_id": imdb_id, "title": title},
                headers=auth_headers(admin_user),
            )
            assert response.status_code == 201

        response = await api_client.get("/api/movies", params={"q": "godfather"})

        data = response.json()
        assert [m["title"] for m in data["movies"]] == ["The Godfather", "The Godfather Part II"]
        assert data["pagination"]["total_items"] == 2


class TestAdminMovies:
    """Tests for administrator-only movie management."""

    async def test_create_movie(
        self, api_client: AsyncClient, admin_user: User, auth_headers
    ) -> None:
        """Test that an administrator can add a movie."""
        response = await api_client.post(
            "/api/movies",
            json={"imdb_id": INCEPTION, "title": "Inception", "year": 2010, "imdb_rating": 8.8},
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Inception"
        assert data["average_rating"] == 0.0
        assert data["total_reviews"] == 0

        response = await api_client.post(
            "/api/movies",
            json={"imdb_id": INCEPTION, "title": "Again"},
            headers=auth_headers(admin_user),
        )
        assert response.status_code == 409

    async def test_regular_user_cannot_create(
        self, api_client: AsyncClient, user: User, auth_headers
    ) -> None:
        """Test that non-administrators are refused."""
        response = await api_client.post(
            "/api/movies",
            json={"imdb_id": INCEPTION, "title": "Inception"},
            headers=auth_headers(user),
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Administrator privileges are required"

    async def test_patch_changes_only_sent_fields(
        self, api_client: AsyncClient, admin_user: User, auth_headers
    ) -> None:
        """Test partial admin edits."""
        await api_client.post(
            "/api/movies",
            json={"imdb_id": INCEPTION, "title": "Inception", "year": 2010},
            headers=auth_headers(admin_user),
        )

        response = await api_client.patch(
            f"/api/movies/{INCEPTION}",
            json={"plot": "Dreams within dreams."},
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["plot"] == "Dreams within dreams."
        assert data["title"] == "Inception"
        assert data["year"] == 2010

    async def test_patch_rejects_null_title(
        self, api_client: AsyncClient, admin_user: User, auth_headers
    ) -> None:
        """Test that the title cannot be erased."""
        response = await api_client.patch(
            f"/api/movies/{INCEPTION}", json={"title": None}, headers=auth_headers(admin_user)
        )
        assert response.status_code == 400

    async def test_patch_missing_movie(
        self, api_client: AsyncClient, admin_user: User, auth_headers
    ) -> None:
        """Test editing a movie that does not exist."""
        response = await api_client.patch(
            f"/api/movies/{INCEPTION}", json={"plot": "x"}, headers=auth_headers(admin_user)
        )
        assert response.status_code == 404

    async def test_enrich_refreshes_from_omdb(
        self,
        api_client: AsyncClient,
        admin_user: User,
        auth_headers,
        mock_omdb_client: MagicMock,
    ) -> None:
        """Test the explicit enrichment endpoint."""
        app.dependency_overrides[get_omdb_client] = lambda: mock_omdb_client

        response = await api_client.post(
            f"/api/movies/{INCEPTION}/enrich", headers=auth_headers(admin_user)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Inception"
        assert data["box_office"] == "$292,587,330"
        mock_omdb_client.close.assert_awaited_once()

    async def test_enrich_unknown_to_omdb(
        self,
        api_client: AsyncClient,
        admin_user: User,
        auth_headers,
        mock_omdb_client: MagicMock,
    ) -> None:
        """Test enrichment of an id OMDb does not know."""
        mock_omdb_client.get_movie.side_effect = NotFoundError("Movie not found!")
        app.dependency_overrides[get_omdb_client] = lambda: mock_omdb_client

        response = await api_client.post(
            f"/api/movies/{INCEPTION}/enrich", headers=auth_headers(admin_user)
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Movie not found"

    async def test_lookup_prefills_form(
        self, client: AsyncClient, mock_omdb_client: MagicMock, mock_admin_user: MagicMock
    ) -> None:
        """Test the admin title lookup."""
        app.dependency_overrides[get_omdb_client] = lambda: mock_omdb_client
        app.dependency_overrides[get_current_active_user] = lambda: mock_admin_user

        try:
            response = await client.get("/api/movies/lookup?title=Inception&year=2010")

            assert response.status_code == 200
            data = response.json()
            assert data["imdb_id"] == INCEPTION
            assert data["title"] == "Inception"
            assert data["runtime"] == "148 min"
            assert data["website"] is None
            mock_omdb_client.get_movie_by_title.assert_awaited_once_with("Inception", year=2010)
        finally:
            app.dependency_overrides.clear()
