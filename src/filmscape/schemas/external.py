"""Pydantic schemas for external API responses (OMDb)."""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# OMDb uses this literal for every missing value
OMDB_MISSING = "N/A"

_YEAR_RE = re.compile(r"\d{4}")


def _present(value: str | None) -> str | None:
    """Return the value unless it is empty or OMDb's missing marker."""
    if value is None:
        return None
    value = value.strip()
    if not value or value == OMDB_MISSING:
        return None
    return value


class OMDbRating(BaseModel):
    """A third-party rating reported by OMDb."""

    model_config = ConfigDict(extra="ignore")

    source: str = Field(alias="Source", description="Rating source")
    value: str = Field(alias="Value", description="Rating value, e.g. 8.8/10")


class OMDbSearchResult(BaseModel):
    """A single movie result from OMDb search."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    imdb_id: str = Field(alias="imdbID", description="IMDb ID")
    title: str = Field(alias="Title", description="Movie title")
    year: str | None = Field(default=None, alias="Year", description="Release year")
    type: str | None = Field(default=None, alias="Type", description="movie, series or episode")
    poster: str | None = Field(default=None, alias="Poster", description="Poster image URL")


class OMDbSearchResponse(BaseModel):
    """Response from the OMDb ``s=`` search endpoint."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    search: list[OMDbSearchResult] = Field(
        default_factory=list, alias="Search", description="Movie results"
    )
    total_results: int = Field(default=0, alias="totalResults", description="Total results")


class OMDbMovieDetails(BaseModel):
    """Detailed movie information from the OMDb ``i=``/``t=`` lookup."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    imdb_id: str = Field(alias="imdbID", description="IMDb ID")
    title: str | None = Field(default=None, alias="Title")
    year: str | None = Field(default=None, alias="Year")
    rated: str | None = Field(default=None, alias="Rated")
    released: str | None = Field(default=None, alias="Released")
    runtime: str | None = Field(default=None, alias="Runtime")
    genre: str | None = Field(default=None, alias="Genre")
    director: str | None = Field(default=None, alias="Director")
    writer: str | None = Field(default=None, alias="Writer")
    actors: str | None = Field(default=None, alias="Actors")
    plot: str | None = Field(default=None, alias="Plot")
    language: str | None = Field(default=None, alias="Language")
    country: str | None = Field(default=None, alias="Country")
    awards: str | None = Field(default=None, alias="Awards")
    poster: str | None = Field(default=None, alias="Poster")
    ratings: list[OMDbRating] = Field(default_factory=list, alias="Ratings")
    metascore: str | None = Field(default=None, alias="Metascore")
    imdb_rating: str | None = Field(default=None, alias="imdbRating")
    imdb_votes: str | None = Field(default=None, alias="imdbVotes")
    type: str | None = Field(default=None, alias="Type")
    dvd: str | None = Field(default=None, alias="DVD")
    box_office: str | None = Field(default=None, alias="BoxOffice")
    production: str | None = Field(default=None, alias="Production")
    website: str | None = Field(default=None, alias="Website")

    def to_movie_fields(self) -> dict[str, Any]:
        """Map the response onto Movie column values.

        Only fields that carry a usable value are returned, so the result
        can be applied as a patch without erasing existing data.
        """
        fields: dict[str, Any] = {}
        for name in (
            "title",
            "rated",
            "released",
            "runtime",
            "genre",
            "director",
            "writer",
            "actors",
            "plot",
            "language",
            "country",
            "awards",
            "poster",
            "imdb_votes",
            "type",
            "dvd",
            "box_office",
            "production",
            "website",
        ):
            value = _present(getattr(self, name))
            if value is not None:
                fields[name] = value

        year = _present(self.year)
        if year is not None:
            match = _YEAR_RE.match(year)  # "2010–2013" for series
            if match:
                fields["year"] = int(match.group())

        rating = _present(self.imdb_rating)
        if rating is not None:
            try:
                fields["imdb_rating"] = float(rating)
            except ValueError:
                pass

        return fields
