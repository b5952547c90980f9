from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from movies_library.api.deps import get_tmdb_client
from movies_library.api.presenters.media import cards_for
from movies_library.schemas.search import SearchPageOut
from movies_library.services.query_state import hydrate_from_url, to_query_string
from movies_library.services.search import run_search
from movies_library.services.tmdb import TMDBClient

router = APIRouter(tags=["search"])


@router.get("/search", response_model=SearchPageOut)
async def search_route(
    request: Request,
    client: TMDBClient = Depends(get_tmdb_client),
):
    # Raw query string so repeated keys resolve first-wins, the same way the browser reads them.
    state = hydrate_from_url(request.url.query)
    outcome = await run_search(client, state)
    return SearchPageOut(
        query_string=to_query_string(state),
        mode=outcome.mode,
        notice=outcome.notice,
        error=outcome.error,
        page=outcome.page,
        results=cards_for(outcome.results, client),
        total_pages=outcome.total_pages,
        total_results=outcome.total_results,
    )
