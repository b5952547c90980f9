from __future__ import annotations

from typing import Any

from movies_library.schemas.media import (
    CastMember,
    ContentRatingList,
    CrewMember,
    Movie,
    MovieDetails,
    PersonDetails,
    ReleaseDatesList,
    Series,
    SeriesDetails,
    Video,
    VideoList,
)
from movies_library.api.presenters.media import card_for, wishlist_entry_for
from movies_library.services.tmdb import TMDBClient

US = "US"
THEATRICAL_RELEASE = 3
KNOWN_FOR_LIMIT = 10


def format_runtime(minutes: int | None) -> str:
    if not minutes:
        return "N/A"
    hours, mins = divmod(minutes, 60)
    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if mins > 0:
        parts.append(f"{mins}m")
    return " ".join(parts) or "N/A"


def us_certification(release_dates: ReleaseDatesList | None) -> str | None:
    if release_dates is None:
        return None
    us_release = next((r for r in release_dates.results if r.iso_3166_1 == US), None)
    if us_release is None:
        return None
    theatrical = next(
        (rd for rd in us_release.release_dates if rd.type == THEATRICAL_RELEASE and rd.certification),
        None,
    )
    if theatrical is not None:
        return theatrical.certification
    first = next((rd for rd in us_release.release_dates if rd.certification), None)
    return first.certification if first else None


def series_us_rating(content_ratings: ContentRatingList | None) -> str | None:
    if content_ratings is None:
        return None
    us_rating = next((r for r in content_ratings.results if r.iso_3166_1 == US), None)
    return us_rating.rating if us_rating and us_rating.rating else None


def youtube_videos(videos: VideoList | None) -> list[Video]:
    if videos is None:
        return []
    return [v for v in videos.results if v.site == "YouTube"]


def main_trailer(videos: VideoList | None) -> Video | None:
    return next((v for v in youtube_videos(videos) if v.type in {"Trailer", "Teaser"}), None)


def director(crew: list[CrewMember]) -> CrewMember | None:
    return next((member for member in crew if member.job == "Director"), None)


def writers(crew: list[CrewMember], limit: int = 3) -> list[CrewMember]:
    return [member for member in crew if member.department == "Writing"][:limit]


def top_cast(cast: list[CastMember], limit: int = 3) -> list[CastMember]:
    return cast[:limit]


def series_creators(crew: list[CrewMember]) -> list[CrewMember]:
    out: list[CrewMember] = []
    seen: set[int] = set()
    for member in crew:
        is_creator = member.job == "Creator" or (
            member.department == "Writing" and member.job in {"Writer", "Screenplay"}
        )
        if not is_creator or member.id in seen:
            continue
        seen.add(member.id)
        out.append(member)
    return out


def known_for(person: PersonDetails, limit: int = KNOWN_FOR_LIMIT) -> list[Movie | Series]:
    credits = person.combined_credits.cast if person.combined_credits else []
    return sorted(credits, key=lambda item: item.vote_average or 0, reverse=True)[:limit]


def _people(rows: list[Any], client: TMDBClient) -> list[dict[str, Any]]:
    return [
        {
            "id": row.id,
            "name": row.name,
            "role": getattr(row, "character", None) or getattr(row, "job", None) or None,
            "image_url": client.image_url(row.profile_path),
            "link": f"/person/{row.id}",
        }
        for row in rows
    ]


def _video_out(video: Video | None) -> dict[str, str] | None:
    if video is None:
        return None
    return {"name": video.name, "key": video.key, "embed_url": f"https://www.youtube.com/embed/{video.key}"}


def _reviews_out(details: MovieDetails | SeriesDetails) -> list[dict[str, Any]]:
    if details.reviews is None:
        return []
    return [
        {
            "id": review.id,
            "author": review.author,
            "rating": review.author_details.rating if review.author_details else None,
            "content": review.content,
            "created_at": review.created_at,
            "url": review.url,
        }
        for review in details.reviews.results
    ]


def movie_detail_out(movie: MovieDetails, client: TMDBClient) -> dict[str, Any]:
    credits = movie.credits
    crew = credits.crew if credits else []
    cast = credits.cast if credits else []
    directed_by = director(crew)
    recommendations = movie.recommendations.results if movie.recommendations else []
    return {
        "id": movie.id,
        "title": movie.title,
        "tagline": movie.tagline,
        "overview": movie.overview,
        "release_date": movie.release_date or None,
        "runtime": format_runtime(movie.runtime),
        "certification": us_certification(movie.release_dates),
        "genres": [g.model_dump() for g in movie.genres],
        "vote_average": movie.vote_average,
        "vote_count": movie.vote_count,
        "status": movie.status,
        "homepage": movie.homepage,
        "imdb_id": movie.imdb_id,
        "poster_url": client.image_url(movie.poster_path),
        "backdrop_url": client.image_url(movie.backdrop_path, original=True),
        "trailer": _video_out(main_trailer(movie.videos)),
        "videos": [_video_out(v) for v in youtube_videos(movie.videos)[:5]],
        "director": _people([directed_by], client)[0] if directed_by else None,
        "writers": _people(writers(crew), client),
        "stars": _people(top_cast(cast), client),
        "cast": _people(top_cast(cast, 12), client),
        "reviews": _reviews_out(movie),
        "recommendations": [card_for(item, client) for item in recommendations[:10]],
        "wishlist_entry": wishlist_entry_for(movie).model_dump(mode="json"),
    }


def series_detail_out(series: SeriesDetails, client: TMDBClient) -> dict[str, Any]:
    credits = series.aggregate_credits
    crew = credits.crew if credits else []
    cast = credits.cast if credits else []
    recommendations = series.recommendations.results if series.recommendations else []
    return {
        "id": series.id,
        "name": series.name,
        "tagline": series.tagline,
        "overview": series.overview,
        "first_air_date": series.first_air_date or None,
        "episode_runtime": format_runtime(series.episode_run_time[0] if series.episode_run_time else None),
        "number_of_seasons": series.number_of_seasons,
        "number_of_episodes": series.number_of_episodes,
        "certification": series_us_rating(series.content_ratings),
        "genres": [g.model_dump() for g in series.genres],
        "vote_average": series.vote_average,
        "vote_count": series.vote_count,
        "status": series.status,
        "homepage": series.homepage,
        "poster_url": client.image_url(series.poster_path),
        "backdrop_url": client.image_url(series.backdrop_path, original=True),
        "trailer": _video_out(main_trailer(series.videos)),
        "creators": _people(series_creators(crew), client),
        "stars": _people(top_cast(cast), client),
        "cast": _people(top_cast(cast, 12), client),
        "reviews": _reviews_out(series),
        "recommendations": [card_for(item, client) for item in recommendations[:10]],
    }


def person_detail_out(person: PersonDetails, client: TMDBClient) -> dict[str, Any]:
    return {
        "id": person.id,
        "name": person.name,
        "biography": person.biography,
        "birthday": person.birthday,
        "deathday": person.deathday,
        "place_of_birth": person.place_of_birth,
        "known_for_department": person.known_for_department,
        "profile_url": client.image_url(person.profile_path, original=True),
        "known_for": [card_for(item, client) for item in known_for(person)],
    }
