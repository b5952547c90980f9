from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, Query

from movies_library.api.deps import get_tmdb_client
from movies_library.api.presenters.media import cards_for
from movies_library.schemas.media import Genre, PagedResults, empty_page
from movies_library.schemas.search import HomeOut, HomeSectionOut, PagedCardsOut
from movies_library.services.query_state import MAX_PAGES
from movies_library.services.tmdb import TMDBClient, TMDBError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["browse"])

HOME_SECTION_SIZE = 10


async def _safe_page(label: str, fetch) -> PagedResults:
    try:
        return await fetch
    except TMDBError as exc:
        logger.warning("tmdb listing failed section=%s", label, exc_info=exc)
        return empty_page()


def _paged_out(data: PagedResults, client: TMDBClient) -> PagedCardsOut:
    return PagedCardsOut(
        page=data.page,
        results=cards_for(data.results, client),
        total_pages=min(data.total_pages, MAX_PAGES),
        total_results=data.total_results,
    )


@router.get("/home", response_model=HomeOut)
async def home_route(client: TMDBClient = Depends(get_tmdb_client)):
    sections = [
        ("now_playing_movies", "Now Playing", client.now_playing_movies()),
        ("popular_movies", "Popular Movies", client.popular_movies()),
        ("top_rated_movies", "Top Rated Movies", client.top_rated_movies()),
        ("popular_series", "Popular TV Shows", client.popular_series()),
        ("top_rated_series", "Top Rated TV Shows", client.top_rated_series()),
        ("popular_people", "Popular People", client.popular_people()),
    ]
    pages = await asyncio.gather(*[_safe_page(key, fetch) for key, _, fetch in sections])
    return HomeOut(
        sections=[
            HomeSectionOut(key=key, title=title, items=cards_for(page.results, client, limit=HOME_SECTION_SIZE))
            for (key, title, _), page in zip(sections, pages)
        ]
    )


@router.get("/movies", response_model=PagedCardsOut)
async def movies_route(
    page: int = Query(1, ge=1, le=MAX_PAGES),
    client: TMDBClient = Depends(get_tmdb_client),
):
    data = await _safe_page("popular_movies", client.popular_movies(page))
    return _paged_out(data, client)


@router.get("/series", response_model=PagedCardsOut)
async def series_route(
    page: int = Query(1, ge=1, le=MAX_PAGES),
    client: TMDBClient = Depends(get_tmdb_client),
):
    data = await _safe_page("popular_series", client.popular_series(page))
    return _paged_out(data, client)


@router.get("/people", response_model=PagedCardsOut)
async def people_route(
    page: int = Query(1, ge=1, le=MAX_PAGES),
    client: TMDBClient = Depends(get_tmdb_client),
):
    data = await _safe_page("popular_people", client.popular_people(page))
    return _paged_out(data, client)


@router.get("/genres/movie", response_model=list[Genre])
async def movie_genres_route(client: TMDBClient = Depends(get_tmdb_client)):
    try:
        return await client.movie_genres()
    except TMDBError as exc:
        logger.warning("tmdb genre list failed", exc_info=exc)
        return []
