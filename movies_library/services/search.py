from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from movies_library.schemas.media import Movie, Person, Series
from movies_library.services.query_state import (
    FILTERS_DISABLED_MESSAGE,
    MAX_PAGES,
    SearchQueryState,
    build_remote_query,
    has_anything_to_show,
)
from movies_library.services.tmdb import TMDBClient, TMDBError

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch results. Please try again."


@dataclass
class SearchOutcome:
    state: SearchQueryState
    mode: Literal["search", "discover"] | None
    results: list[Movie | Series | Person] = field(default_factory=list)
    page: int = 1
    total_pages: int = 1
    total_results: int = 0
    notice: str | None = None
    error: str | None = None


async def run_search(client: TMDBClient, state: SearchQueryState) -> SearchOutcome:
    notice = FILTERS_DISABLED_MESSAGE if state.is_search_active else None

    # Without free text or filters only the first page of the default listing is shown.
    if not has_anything_to_show(state) and state.page > 1:
        return SearchOutcome(state=state, mode=None, page=state.page, notice=notice)

    query = build_remote_query(state)
    try:
        envelope = await client.fetch_page(query.path, query.params, media_type=query.media_type)
    except TMDBError as exc:
        logger.warning("search failed path=%s page=%s", query.path, state.page, exc_info=exc)
        return SearchOutcome(
            state=state,
            mode=query.mode,
            page=state.page,
            notice=notice,
            error=FETCH_FAILED_MESSAGE,
        )

    return SearchOutcome(
        state=state,
        mode=query.mode,
        results=list(envelope.results),
        page=envelope.page,
        total_pages=min(envelope.total_pages, MAX_PAGES),
        total_results=envelope.total_results,
        notice=notice,
    )
