from __future__ import annotations

from movies_library.schemas.media import Movie, Person, Series
from movies_library.schemas.search import MediaCardOut
from movies_library.schemas.wishlist import WishlistEntry
from movies_library.services.tmdb import TMDBClient


def card_for(item: Movie | Series | Person, client: TMDBClient) -> MediaCardOut:
    if isinstance(item, Movie):
        return MediaCardOut(
            kind="movie",
            id=item.id,
            title=item.title,
            date=item.release_date or None,
            image_url=client.image_url(item.poster_path),
            link=f"/movie/{item.id}",
            rating=item.vote_average,
            wishlistable=True,
        )
    if isinstance(item, Series):
        return MediaCardOut(
            kind="tv",
            id=item.id,
            title=item.name,
            date=item.first_air_date or None,
            image_url=client.image_url(item.poster_path),
            link=f"/series/{item.id}",
            rating=item.vote_average,
        )
    if isinstance(item, Person):
        return MediaCardOut(
            kind="person",
            id=item.id,
            title=item.name,
            image_url=client.image_url(item.profile_path),
            link=f"/person/{item.id}",
        )
    raise TypeError(f"Unsupported media item: {item!r}")


def cards_for(items: list[Movie | Series | Person], client: TMDBClient, *, limit: int | None = None) -> list[MediaCardOut]:
    rows = items[:limit] if limit is not None else items
    return [card_for(item, client) for item in rows]


def wishlist_entry_for(movie: Movie) -> WishlistEntry:
    return WishlistEntry(
        id=movie.id,
        title=movie.title,
        poster_path=movie.poster_path,
        release_date=movie.release_date,
        vote_average=float(movie.vote_average),
        overview=movie.overview or None,
        backdrop_path=movie.backdrop_path,
        vote_count=movie.vote_count,
    )
