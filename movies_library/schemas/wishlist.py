from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator

# Persisted rows may leave these out, but never store them as null.
OMITTABLE_FIELDS = ("vote_count",)


class WishlistEntry(BaseModel):
    # Persisted entries are rejected as a whole on any shape mismatch.
    model_config = ConfigDict(strict=True, extra="ignore")

    id: int
    title: str
    poster_path: str | None
    release_date: str
    vote_average: float
    overview: str | None = None
    backdrop_path: str | None = None
    vote_count: int | None = None
    media_type: Literal["movie"] = "movie"

    @model_validator(mode="before")
    @classmethod
    def check_persisted_shape(cls, data: Any, info: ValidationInfo) -> Any:
        if not (isinstance(data, dict) and info.context and info.context.get("persisted")):
            return data
        if data.get("media_type") != "movie":
            raise ValueError("media_type must be 'movie'")
        for name in OMITTABLE_FIELDS:
            if name in data and data[name] is None:
                raise ValueError(f"{name} must be a number when present")
        return data

    def to_storage(self) -> dict[str, Any]:
        absent = {name for name in OMITTABLE_FIELDS if getattr(self, name) is None}
        return self.model_dump(mode="json", exclude=absent)


class WishlistAddRequest(BaseModel):
    id: int = Field(gt=0)
    title: str = Field(min_length=1)
    poster_path: str | None = None
    release_date: str = ""
    vote_average: float = Field(default=0.0, ge=0, le=10)
    overview: str | None = None
    backdrop_path: str | None = None
    vote_count: int | None = Field(default=None, ge=0)
    media_type: Literal["movie"] = "movie"

    def to_entry(self) -> WishlistEntry:
        return WishlistEntry.model_validate(self.model_dump())


class WishlistOut(BaseModel):
    items: list[WishlistEntry]
    count: int


class WishlistMembershipOut(BaseModel):
    id: int
    in_wishlist: bool


class WishlistMutationOut(BaseModel):
    changed: bool
    count: int
