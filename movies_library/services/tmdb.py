from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from movies_library.core.config import TMDBConfig
from movies_library.schemas.media import (
    Genre,
    MovieDetails,
    PagedResults,
    PersonDetails,
    SeriesDetails,
    parse_movie_details,
    parse_paged_results,
    parse_person_details,
    parse_series_details,
)

logger = logging.getLogger(__name__)

MOVIE_APPENDS = "videos,credits,reviews,recommendations,release_dates"
SERIES_APPENDS = "videos,aggregate_credits,reviews,recommendations,content_ratings"
PERSON_APPENDS = "combined_credits"


class TMDBError(RuntimeError):
    pass


class TMDBClient:
    """Read-only TMDB client.

    Every request opens a short-lived ``httpx.AsyncClient``; ``transport`` lets
    tests plug in an ``httpx.MockTransport``. Genre and detail payloads share
    a per-instance TTL cache.
    """

    def __init__(self, config: TMDBConfig, *, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self._transport = transport
        self._cache: dict[str, tuple[float, Any]] = {}

    # ─────────────────────────────────────────────
    # Cache
    # ─────────────────────────────────────────────

    def _cache_get(self, key: str):
        hit = self._cache.get(key)
        if not hit:
            return None
        expires_at, value = hit
        if time.time() > expires_at:
            self._cache.pop(key, None)
            return None
        return value

    def _cache_set(self, key: str, value) -> None:
        self._cache[key] = (time.time() + self.config.cache_ttl_seconds, value)

    def clear_cache(self) -> None:
        self._cache.clear()

    # ─────────────────────────────────────────────
    # Transport
    # ─────────────────────────────────────────────

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        query: dict[str, Any] = {"api_key": self.config.api_key, "language": self.config.language}
        if params:
            query.update({k: v for k, v in params.items() if v is not None})

        try:
            async with httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            ) as client:
                r = await client.get(path, params=query, headers={"Accept": "application/json"})
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPStatusError as exc:
            raise TMDBError(f"TMDB returned {exc.response.status_code} for {path}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise TMDBError(f"TMDB request failed for {path}") from exc

        if not isinstance(data, dict):
            raise TMDBError(f"Unexpected TMDB payload for {path}")
        return data

    async def fetch_page(self, path: str, params: dict[str, Any], *, media_type: str) -> PagedResults:
        data = await self.get_json(path, params)
        return parse_paged_results(data, media_type)

    # ─────────────────────────────────────────────
    # Listings
    # ─────────────────────────────────────────────

    async def popular_movies(self, page: int = 1) -> PagedResults:
        return await self.fetch_page("/movie/popular", {"page": page}, media_type="movie")

    async def top_rated_movies(self, page: int = 1) -> PagedResults:
        return await self.fetch_page("/movie/top_rated", {"page": page}, media_type="movie")

    async def now_playing_movies(self, page: int = 1) -> PagedResults:
        return await self.fetch_page("/movie/now_playing", {"page": page}, media_type="movie")

    async def popular_series(self, page: int = 1) -> PagedResults:
        return await self.fetch_page("/tv/popular", {"page": page}, media_type="tv")

    async def top_rated_series(self, page: int = 1) -> PagedResults:
        return await self.fetch_page("/tv/top_rated", {"page": page}, media_type="tv")

    async def popular_people(self, page: int = 1) -> PagedResults:
        return await self.fetch_page("/person/popular", {"page": page}, media_type="person")

    async def movie_genres(self) -> list[Genre]:
        key = "genres:movie"
        cached = self._cache_get(key)
        if cached is not None:
            return list(cached)

        data = await self.get_json("/genre/movie/list")
        genres = [
            Genre(id=row["id"], name=row["name"])
            for row in data.get("genres") or []
            if isinstance(row, dict) and isinstance(row.get("id"), int) and isinstance(row.get("name"), str)
        ]
        self._cache_set(key, genres)
        return list(genres)

    # ─────────────────────────────────────────────
    # Details
    # ─────────────────────────────────────────────

    async def _details_payload(self, path: str, appends: str) -> dict[str, Any] | None:
        cached = self._cache_get(path)
        if isinstance(cached, dict):
            return cached
        try:
            data = await self.get_json(path, {"append_to_response": appends})
        except TMDBError as exc:
            cause = exc.__cause__
            if isinstance(cause, httpx.HTTPStatusError) and cause.response.status_code == 404:
                return None
            raise
        self._cache_set(path, data)
        return data

    async def movie_details(self, movie_id: int) -> MovieDetails | None:
        data = await self._details_payload(f"/movie/{movie_id}", MOVIE_APPENDS)
        return parse_movie_details(data) if data is not None else None

    async def series_details(self, series_id: int) -> SeriesDetails | None:
        data = await self._details_payload(f"/tv/{series_id}", SERIES_APPENDS)
        return parse_series_details(data) if data is not None else None

    async def person_details(self, person_id: int) -> PersonDetails | None:
        data = await self._details_payload(f"/person/{person_id}", PERSON_APPENDS)
        return parse_person_details(data) if data is not None else None

    # ─────────────────────────────────────────────
    # Images
    # ─────────────────────────────────────────────

    def image_url(self, path: str | None, *, original: bool = False) -> str | None:
        if not path:
            return None
        base = self.config.image_original_base_url if original else self.config.image_base_url
        return f"{base}/{path.lstrip('/')}"
