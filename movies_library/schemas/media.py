from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class _TMDBModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Movie(_TMDBModel):
    media_type: Literal["movie"] = "movie"
    id: int
    title: str
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: str = ""
    overview: str = ""
    vote_average: float = 0.0
    vote_count: int = 0
    genre_ids: list[int] = Field(default_factory=list)


class Series(_TMDBModel):
    media_type: Literal["tv"] = "tv"
    id: int
    name: str
    poster_path: str | None = None
    backdrop_path: str | None = None
    first_air_date: str = ""
    overview: str = ""
    vote_average: float = 0.0
    vote_count: int = 0
    genre_ids: list[int] = Field(default_factory=list)


class Person(_TMDBModel):
    media_type: Literal["person"] = "person"
    id: int
    name: str
    profile_path: str | None = None
    popularity: float = 0.0
    known_for_department: str = ""


MediaItem = Annotated[Union[Movie, Series, Person], Field(discriminator="media_type")]

_media_item_adapter: TypeAdapter[Movie | Series | Person] = TypeAdapter(MediaItem)


class PagedResults(BaseModel):
    page: int = 1
    results: list[MediaItem] = Field(default_factory=list)
    total_pages: int = 1
    total_results: int = 0


def empty_page() -> PagedResults:
    return PagedResults(page=1, results=[], total_pages=1, total_results=0)


def _clean_row(raw: dict[str, Any]) -> dict[str, Any]:
    # TMDB sends explicit nulls for several scalar fields
    return {k: v for k, v in raw.items() if v is not None or k.endswith("_path")}


def parse_media_item(raw: Any, default_media_type: str) -> Movie | Series | Person | None:
    """Tag a TMDB result row and validate it into one of the media variants.

    Rows carrying their own ``media_type`` (multi search, combined credits)
    keep it; list endpoints omit it, so ``default_media_type`` is used.
    Rows without an id or without a title/name are dropped.
    """
    if not isinstance(raw, dict):
        return None
    row = _clean_row(raw)
    row["media_type"] = row.get("media_type") or default_media_type
    if row["media_type"] == "movie" and not row.get("title"):
        return None
    if row["media_type"] in {"tv", "person"} and not row.get("name"):
        return None
    try:
        return _media_item_adapter.validate_python(row)
    except ValidationError:
        return None


def parse_paged_results(data: Any, default_media_type: str) -> PagedResults:
    if not isinstance(data, dict):
        return empty_page()

    items = []
    for raw in data.get("results") or []:
        item = parse_media_item(raw, default_media_type)
        if item is not None:
            items.append(item)

    page = data.get("page")
    total_pages = data.get("total_pages")
    total_results = data.get("total_results")
    return PagedResults(
        page=page if isinstance(page, int) and page > 0 else 1,
        results=items,
        total_pages=total_pages if isinstance(total_pages, int) and total_pages > 0 else 1,
        total_results=total_results if isinstance(total_results, int) and total_results >= 0 else len(items),
    )


# ─────────────────────────────────────────────
# Detail payloads
# ─────────────────────────────────────────────


class Genre(_TMDBModel):
    id: int
    name: str


class CastMember(_TMDBModel):
    id: int
    name: str
    character: str = ""
    profile_path: str | None = None
    order: int = 0


class CrewMember(_TMDBModel):
    id: int
    name: str
    job: str = ""
    department: str = ""
    profile_path: str | None = None


class Credits(_TMDBModel):
    cast: list[CastMember] = Field(default_factory=list)
    crew: list[CrewMember] = Field(default_factory=list)


class Video(_TMDBModel):
    id: str
    key: str
    name: str = ""
    site: str = ""
    type: str = ""


class VideoList(_TMDBModel):
    results: list[Video] = Field(default_factory=list)


class ReviewAuthorDetails(_TMDBModel):
    name: str = ""
    username: str = ""
    avatar_path: str | None = None
    rating: float | None = None


class Review(_TMDBModel):
    id: str
    author: str = ""
    author_details: ReviewAuthorDetails | None = None
    content: str = ""
    created_at: str = ""
    url: str = ""


class ReviewList(_TMDBModel):
    page: int = 1
    results: list[Review] = Field(default_factory=list)
    total_pages: int = 1
    total_results: int = 0


class ReleaseDateInfo(_TMDBModel):
    certification: str = ""
    release_date: str = ""
    type: int = 0


class ReleaseDatesOnCountry(_TMDBModel):
    iso_3166_1: str
    release_dates: list[ReleaseDateInfo] = Field(default_factory=list)


class ReleaseDatesList(_TMDBModel):
    results: list[ReleaseDatesOnCountry] = Field(default_factory=list)


class ContentRating(_TMDBModel):
    iso_3166_1: str
    rating: str = ""


class ContentRatingList(_TMDBModel):
    results: list[ContentRating] = Field(default_factory=list)


class MovieDetails(Movie):
    genres: list[Genre] = Field(default_factory=list)
    runtime: int | None = None
    tagline: str | None = None
    status: str = ""
    homepage: str | None = None
    imdb_id: str | None = None
    videos: VideoList | None = None
    credits: Credits | None = None
    reviews: ReviewList | None = None
    recommendations: PagedResults | None = None
    release_dates: ReleaseDatesList | None = None


class SeriesDetails(Series):
    genres: list[Genre] = Field(default_factory=list)
    episode_run_time: list[int] = Field(default_factory=list)
    number_of_episodes: int = 0
    number_of_seasons: int = 0
    tagline: str | None = None
    status: str = ""
    homepage: str | None = None
    videos: VideoList | None = None
    aggregate_credits: Credits | None = None
    reviews: ReviewList | None = None
    recommendations: PagedResults | None = None
    content_ratings: ContentRatingList | None = None


class PersonCredits(_TMDBModel):
    cast: list[Movie | Series] = Field(default_factory=list)


class PersonDetails(Person):
    biography: str = ""
    birthday: str | None = None
    deathday: str | None = None
    place_of_birth: str | None = None
    combined_credits: PersonCredits | None = None


def _parse_credit_rows(node: Any) -> list[Movie | Series]:
    rows = node.get("cast") if isinstance(node, dict) else None
    out: list[Movie | Series] = []
    for raw in rows if isinstance(rows, list) else []:
        if not isinstance(raw, dict) or raw.get("media_type") not in {"movie", "tv"}:
            continue
        item = parse_media_item(raw, raw["media_type"])
        if isinstance(item, (Movie, Series)):
            out.append(item)
    return out


def parse_movie_details(data: dict[str, Any]) -> MovieDetails | None:
    payload = _clean_row(data)
    payload["media_type"] = "movie"
    recommendations = payload.pop("recommendations", None)
    try:
        details = MovieDetails.model_validate(payload)
    except ValidationError:
        return None
    if recommendations is not None:
        details.recommendations = parse_paged_results(recommendations, "movie")
    return details


def parse_series_details(data: dict[str, Any]) -> SeriesDetails | None:
    payload = _clean_row(data)
    payload["media_type"] = "tv"
    recommendations = payload.pop("recommendations", None)
    try:
        details = SeriesDetails.model_validate(payload)
    except ValidationError:
        return None
    if recommendations is not None:
        details.recommendations = parse_paged_results(recommendations, "tv")
    return details


def parse_person_details(data: dict[str, Any]) -> PersonDetails | None:
    payload = _clean_row(data)
    payload["media_type"] = "person"
    credits = payload.pop("combined_credits", None)
    try:
        details = PersonDetails.model_validate(payload)
    except ValidationError:
        return None
    if credits is not None:
        details.combined_credits = PersonCredits(cast=_parse_credit_rows(credits))
    return details
