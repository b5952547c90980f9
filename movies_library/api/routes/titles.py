from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from movies_library.api.deps import get_tmdb_client
from movies_library.api.presenters.details import movie_detail_out, person_detail_out, series_detail_out
from movies_library.services.tmdb import TMDBClient, TMDBError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["titles"])


async def _load(kind: str, fetch):
    try:
        details = await fetch
    except TMDBError as exc:
        logger.warning("tmdb %s details failed", kind, exc_info=exc)
        details = None
    if details is None:
        raise HTTPException(status_code=404, detail=f"{kind.capitalize()} not found")
    return details


@router.get("/movie/{movie_id}", response_model=dict)
async def movie_route(movie_id: int, client: TMDBClient = Depends(get_tmdb_client)):
    movie = await _load("movie", client.movie_details(movie_id))
    return movie_detail_out(movie, client)


@router.get("/series/{series_id}", response_model=dict)
async def series_route(series_id: int, client: TMDBClient = Depends(get_tmdb_client)):
    series = await _load("series", client.series_details(series_id))
    return series_detail_out(series, client)


@router.get("/person/{person_id}", response_model=dict)
async def person_route(person_id: int, client: TMDBClient = Depends(get_tmdb_client)):
    person = await _load("person", client.person_details(person_id))
    return person_detail_out(person, client)
