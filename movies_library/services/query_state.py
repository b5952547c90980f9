from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Literal
from urllib.parse import parse_qsl, urlencode

MAX_PAGES = 500
MIN_RATING = 1.0
MAX_RATING = 10.0

FILTERS_DISABLED_MESSAGE = (
    "When searching by title, only year range (if set to a single year) is applied. "
    "All other filters (Sort By, Genres, Rating Range) are disabled. "
    "Clear the search bar to use all filters."
)

_YEAR_RE = re.compile(r"^[0-9]{4}$")


class SortProperty(str, Enum):
    POPULARITY = "popularity"
    PRIMARY_RELEASE_DATE = "primary_release_date"
    REVENUE = "revenue"
    VOTE_AVERAGE = "vote_average"
    VOTE_COUNT = "vote_count"


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


class MediaTypeFilter(str, Enum):
    MOVIE = "movie"
    TV = "tv"
    ALL = "all"


@dataclass(frozen=True)
class SearchFilters:
    sort_property: SortProperty = SortProperty.POPULARITY
    sort_direction: SortDirection = SortDirection.DESCENDING
    genre_ids: frozenset[int] = frozenset()
    release_year_from: str | None = None
    release_year_to: str | None = None
    rating_from: float | None = None
    rating_to: float | None = None
    media_type: MediaTypeFilter = MediaTypeFilter.ALL

    @property
    def sort_by(self) -> str:
        return f"{self.sort_property.value}.{self.sort_direction.value}"

    @property
    def pinned_year(self) -> int | None:
        if self.release_year_from and self.release_year_from == self.release_year_to:
            return int(self.release_year_from)
        return None


DEFAULT_FILTERS = SearchFilters()

# Fields that always hold a concrete value after a merge.
_CONCRETE_DEFAULTS = {
    "sort_property": DEFAULT_FILTERS.sort_property,
    "sort_direction": DEFAULT_FILTERS.sort_direction,
    "media_type": DEFAULT_FILTERS.media_type,
}
_FILTER_FIELDS = {f.name for f in fields(SearchFilters)}


@dataclass(frozen=True)
class SearchQueryState:
    free_text: str = ""
    page: int = 1
    filters: SearchFilters = DEFAULT_FILTERS

    @property
    def is_search_active(self) -> bool:
        return bool(self.free_text.strip())


@dataclass(frozen=True)
class DataSource:
    mode: Literal["search", "discover"]
    media_type: Literal["movie", "tv"]
    year: int | None = None

    @property
    def filters_suppressed(self) -> bool:
        return self.mode == "search"


@dataclass(frozen=True)
class RemoteQuery:
    mode: Literal["search", "discover"]
    path: str
    params: dict[str, Any]
    media_type: Literal["movie", "tv"]


# ─────────────────────────────────────────────
# URL parsing
# ─────────────────────────────────────────────


def _parse_page(raw: str | None) -> int:
    if raw is None:
        return 1
    try:
        page = int(str(raw).strip())
    except (TypeError, ValueError):
        return 1
    if page < 1:
        return 1
    return min(page, MAX_PAGES)


def _parse_sort(raw: str | None) -> tuple[SortProperty, SortDirection]:
    default = (DEFAULT_FILTERS.sort_property, DEFAULT_FILTERS.sort_direction)
    if not raw:
        return default
    prop, _, direction = raw.strip().rpartition(".")
    try:
        return SortProperty(prop), SortDirection(direction)
    except ValueError:
        return default


def _parse_genres(raw: str | None) -> frozenset[int]:
    if not raw:
        return frozenset()
    out: set[int] = set()
    for token in raw.split(","):
        token = token.strip()
        if token.isascii() and token.isdigit():
            out.add(int(token))
    return frozenset(out)


def _parse_year(raw: str | None) -> str | None:
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned if _YEAR_RE.match(cleaned) else None


def _parse_rating(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if math.isnan(value) or not MIN_RATING <= value <= MAX_RATING:
        return None
    return value


def _parse_media_type(raw: str | None) -> MediaTypeFilter:
    try:
        return MediaTypeFilter((raw or "").strip())
    except ValueError:
        return MediaTypeFilter.ALL


def _as_mapping(params: Mapping[str, str] | str) -> Mapping[str, str]:
    if isinstance(params, str):
        out: dict[str, str] = {}
        for key, value in parse_qsl(params.lstrip("?"), keep_blank_values=True):
            # first occurrence wins, like URLSearchParams.get
            out.setdefault(key, value)
        return out
    return params


def hydrate_from_url(params: Mapping[str, str] | str) -> SearchQueryState:
    """Build the query state from URL parameters.

    Unknown or malformed values fall back to their defaults; nothing here
    raises on user input.
    """
    values = _as_mapping(params)

    genres_raw = values.get("genres")
    if not (genres_raw or "").strip():
        genres_raw = values.get("genreId")

    sort_property, sort_direction = _parse_sort(values.get("sortBy"))
    filters = SearchFilters(
        sort_property=sort_property,
        sort_direction=sort_direction,
        genre_ids=_parse_genres(genres_raw),
        release_year_from=_parse_year(values.get("gte")),
        release_year_to=_parse_year(values.get("lte")),
        rating_from=_parse_rating(values.get("vagte")),
        rating_to=_parse_rating(values.get("valte")),
        media_type=_parse_media_type(values.get("type")),
    )
    return SearchQueryState(
        free_text=values.get("q") or "",
        page=_parse_page(values.get("page")),
        filters=filters,
    )


# ─────────────────────────────────────────────
# URL serialization
# ─────────────────────────────────────────────


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def serialize_to_url(state: SearchQueryState) -> dict[str, str]:
    params: dict[str, str] = {}
    filters = state.filters

    text = state.free_text.strip()
    if text:
        params["q"] = text
    if filters.sort_by != DEFAULT_FILTERS.sort_by:
        params["sortBy"] = filters.sort_by
    if filters.genre_ids:
        params["genres"] = ",".join(str(g) for g in sorted(filters.genre_ids))
    if filters.release_year_from:
        params["gte"] = filters.release_year_from
    if filters.release_year_to:
        params["lte"] = filters.release_year_to
    if filters.rating_from is not None:
        params["vagte"] = _format_number(filters.rating_from)
    if filters.rating_to is not None:
        params["valte"] = _format_number(filters.rating_to)
    if filters.media_type != DEFAULT_FILTERS.media_type:
        params["type"] = filters.media_type.value
    params["page"] = str(state.page)
    return params


def to_query_string(state: SearchQueryState) -> str:
    return urlencode(serialize_to_url(state), safe=",")


# ─────────────────────────────────────────────
# Filter logic
# ─────────────────────────────────────────────


def is_filter_set_active(filters: SearchFilters) -> bool:
    return filters != DEFAULT_FILTERS


def has_anything_to_show(state: SearchQueryState) -> bool:
    return state.is_search_active or is_filter_set_active(state.filters)


def merge_filters(current: SearchFilters, changes: Mapping[str, Any]) -> SearchFilters:
    unknown = set(changes) - _FILTER_FIELDS
    if unknown:
        raise ValueError(f"Unknown filter field(s): {', '.join(sorted(unknown))}")

    # Values the URL parser would drop are unset here too.
    updates: dict[str, Any] = {}
    for name, value in changes.items():
        if name in _CONCRETE_DEFAULTS:
            value = value or getattr(current, name) or _CONCRETE_DEFAULTS[name]
            value = type(_CONCRETE_DEFAULTS[name])(value)
        elif name == "genre_ids":
            value = _parse_genres(",".join(str(g) for g in value)) if value else frozenset()
        elif name in {"release_year_from", "release_year_to"}:
            value = _parse_year(str(value)) if value else None
        elif name in {"rating_from", "rating_to"}:
            value = _parse_rating(str(value)) if value is not None else None
        updates[name] = value
    return replace(current, **updates)


def resolve_data_source(free_text: str, filters: SearchFilters) -> DataSource:
    media_type: Literal["movie", "tv"] = "tv" if filters.media_type == MediaTypeFilter.TV else "movie"
    mode: Literal["search", "discover"] = "search" if free_text.strip() else "discover"
    return DataSource(mode=mode, media_type=media_type, year=filters.pinned_year)


def build_remote_query(state: SearchQueryState) -> RemoteQuery:
    filters = state.filters
    source = resolve_data_source(state.free_text, filters)
    is_tv = source.media_type == "tv"
    year_key = "first_air_date_year" if is_tv else "primary_release_year"

    if source.mode == "search":
        params: dict[str, Any] = {
            "query": state.free_text.strip(),
            "page": state.page,
            "include_adult": "false",
        }
        if source.year is not None:
            params[year_key] = source.year
        return RemoteQuery(mode="search", path=f"/search/{source.media_type}", params=params, media_type=source.media_type)

    sort_property = filters.sort_property.value
    if is_tv and filters.sort_property == SortProperty.PRIMARY_RELEASE_DATE:
        sort_property = "first_air_date"
    date_key = "first_air_date" if is_tv else "primary_release_date"

    params = {
        "page": state.page,
        "sort_by": f"{sort_property}.{filters.sort_direction.value}",
        "include_adult": "false",
    }
    if is_tv:
        params["include_null_first_air_dates"] = "false"
    else:
        params["include_video"] = "false"
    if filters.genre_ids:
        params["with_genres"] = ",".join(str(g) for g in sorted(filters.genre_ids))
    if source.year is not None:
        params[year_key] = source.year
    if filters.release_year_from:
        params[f"{date_key}.gte"] = f"{filters.release_year_from}-01-01"
    if filters.release_year_to:
        params[f"{date_key}.lte"] = f"{filters.release_year_to}-12-31"
    if filters.rating_from is not None:
        params["vote_average.gte"] = filters.rating_from
    if filters.rating_to is not None:
        params["vote_average.lte"] = filters.rating_to
    return RemoteQuery(mode="discover", path=f"/discover/{source.media_type}", params=params, media_type=source.media_type)
