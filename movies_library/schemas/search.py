from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class MediaCardOut(BaseModel):
    kind: Literal["movie", "tv", "person"]
    id: int
    title: str
    date: str | None = None
    image_url: str | None = None
    link: str
    rating: float | None = None
    wishlistable: bool = False


class PagedCardsOut(BaseModel):
    page: int
    results: list[MediaCardOut]
    total_pages: int
    total_results: int


class SearchPageOut(BaseModel):
    query_string: str
    mode: Literal["search", "discover"] | None
    notice: str | None = None
    error: str | None = None
    page: int
    results: list[MediaCardOut]
    total_pages: int
    total_results: int


class HomeSectionOut(BaseModel):
    key: str
    title: str
    items: list[MediaCardOut]


class HomeOut(BaseModel):
    sections: list[HomeSectionOut]
