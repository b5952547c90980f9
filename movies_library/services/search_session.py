from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable

from movies_library.core.config import settings
from movies_library.services.debounce import Debouncer, Scheduler
from movies_library.services.query_state import (
    MAX_PAGES,
    SearchQueryState,
    hydrate_from_url,
    is_filter_set_active,
    merge_filters,
    to_query_string,
)
from movies_library.services.search import SearchOutcome, run_search
from movies_library.services.tmdb import TMDBClient

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = settings.search_debounce_ms / 1000


class SearchSynchronizer:
    """Keeps the search box, the filter set and the URL in step.

    The URL is the source of truth: every accepted change is pushed through
    ``navigate`` as ``/search?<query>``. Typing is debounced; filter, page
    and submit changes push immediately.
    """

    def __init__(
        self,
        navigate: Callable[[str], Any],
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        scheduler: Scheduler | None = None,
        path: str = "/search",
    ):
        self.navigate = navigate
        self.path = path
        self.state = SearchQueryState()
        self.text = ""
        self.total_pages = 1
        self._debouncer = Debouncer(debounce_seconds, self._push_text, scheduler=scheduler)
        self._request_token = 0

    @property
    def debounce_pending(self) -> bool:
        return self._debouncer.pending

    def hydrate(self, params: Mapping[str, str] | str) -> SearchQueryState:
        self.state = hydrate_from_url(params)
        self.text = self.state.free_text
        return self.state

    def on_free_text_change(self, text: str) -> None:
        self.text = text
        self._debouncer.schedule(text)

    def submit(self) -> None:
        self._debouncer.flush_now(self.text)

    def on_filter_change(self, changes: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        merged = merge_filters(self.state.filters, {**(changes or {}), **kwargs})
        self._push(SearchQueryState(free_text=self.text, page=1, filters=merged))

    def on_page_change(self, page: int) -> bool:
        has_query = bool(self.text.strip())
        has_filters = is_filter_set_active(self.state.filters)
        if not 1 <= page <= min(self.total_pages, MAX_PAGES):
            return False
        if not (has_query or has_filters):
            return False
        self._push(SearchQueryState(free_text=self.text, page=page, filters=self.state.filters))
        return True

    async def load(self, client: TMDBClient) -> SearchOutcome | None:
        """Fetch results for the current state.

        Returns ``None`` when a newer ``load`` started before this one
        finished; only the latest request may update ``total_pages``.
        """
        self._request_token += 1
        token = self._request_token
        outcome = await run_search(client, self.state)
        if token != self._request_token:
            logger.debug("dropping stale search response token=%s latest=%s", token, self._request_token)
            return None
        self.total_pages = outcome.total_pages
        return outcome

    def _push_text(self, text: str) -> None:
        self._push(SearchQueryState(free_text=text, page=1, filters=self.state.filters))

    def _push(self, state: SearchQueryState) -> None:
        # the pushed state already carries the latest text
        self._debouncer.cancel()
        self.state = state
        self.navigate(f"{self.path}?{to_query_string(state)}")
