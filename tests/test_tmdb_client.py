import httpx
import pytest

from movies_library.schemas.media import Movie, Person, Series
from movies_library.services.tmdb import TMDBError
from tests.payloads import movie_row, page_payload, person_row, series_row

pytestmark = pytest.mark.anyio


async def test_requests_carry_api_key_and_language(fake_tmdb, tmdb_client):
    fake_tmdb.add("/movie/popular", page_payload([movie_row(1, "Heat")]))

    await tmdb_client.popular_movies(page=2)

    params = fake_tmdb.last_params("/movie/popular")
    assert params == {"api_key": "test-api-key", "language": "en-US", "page": "2"}


async def test_listing_rows_are_tagged_and_invalid_rows_dropped(fake_tmdb, tmdb_client):
    fake_tmdb.add(
        "/tv/popular",
        page_payload([series_row(1396, "Breaking Bad"), {"id": 2, "name": None}, "junk"]),
    )

    page = await tmdb_client.popular_series()

    assert [type(item) for item in page.results] == [Series]
    assert page.results[0].name == "Breaking Bad"


async def test_people_listing(fake_tmdb, tmdb_client):
    fake_tmdb.add("/person/popular", page_payload([person_row(6193, "Leonardo DiCaprio")]))

    page = await tmdb_client.popular_people()

    assert isinstance(page.results[0], Person)


async def test_http_errors_become_tmdb_errors(fake_tmdb, tmdb_client):
    fake_tmdb.add("/movie/top_rated", {"status_message": "Invalid API key"}, status_code=401)

    with pytest.raises(TMDBError):
        await tmdb_client.top_rated_movies()


async def test_transport_errors_become_tmdb_errors(fake_tmdb, tmdb_client):
    fake_tmdb.add("/movie/now_playing", httpx.ConnectError("unreachable"))

    with pytest.raises(TMDBError):
        await tmdb_client.now_playing_movies()


async def test_non_object_payload_is_rejected(fake_tmdb, tmdb_client):
    fake_tmdb.add("/movie/popular", [1, 2, 3])

    with pytest.raises(TMDBError):
        await tmdb_client.popular_movies()


async def test_movie_genres_are_cached(fake_tmdb, tmdb_client):
    fake_tmdb.add("/genre/movie/list", {"genres": [{"id": 28, "name": "Action"}, {"id": "x"}]})

    first = await tmdb_client.movie_genres()
    second = await tmdb_client.movie_genres()

    assert [g.name for g in first] == ["Action"]
    assert second == first
    assert len(fake_tmdb.requests) == 1

    tmdb_client.clear_cache()
    await tmdb_client.movie_genres()
    assert len(fake_tmdb.requests) == 2


async def test_movie_details_parse_appended_sections(fake_tmdb, tmdb_client):
    fake_tmdb.add(
        "/movie/27205",
        {
            **movie_row(27205, "Inception"),
            "runtime": 148,
            "genres": [{"id": 28, "name": "Action"}],
            "credits": {"cast": [{"id": 6193, "name": "Leonardo DiCaprio", "character": "Cobb"}], "crew": []},
            "recommendations": page_payload([movie_row(157336, "Interstellar")]),
        },
    )

    details = await tmdb_client.movie_details(27205)

    assert details is not None
    assert details.runtime == 148
    assert details.credits.cast[0].character == "Cobb"
    assert isinstance(details.recommendations.results[0], Movie)
    params = fake_tmdb.last_params("/movie/27205")
    assert params["append_to_response"] == "videos,credits,reviews,recommendations,release_dates"


async def test_details_not_found_returns_none(fake_tmdb, tmdb_client):
    assert await tmdb_client.movie_details(1) is None
    assert await tmdb_client.series_details(1) is None
    assert await tmdb_client.person_details(1) is None


async def test_details_server_error_raises(fake_tmdb, tmdb_client):
    fake_tmdb.add("/tv/1396", {}, status_code=503)

    with pytest.raises(TMDBError):
        await tmdb_client.series_details(1396)


async def test_person_credits_keep_only_movies_and_series(fake_tmdb, tmdb_client):
    fake_tmdb.add(
        "/person/6193",
        {
            **person_row(6193, "Leonardo DiCaprio"),
            "biography": "Actor.",
            "combined_credits": {
                "cast": [
                    {**movie_row(27205, "Inception"), "media_type": "movie"},
                    {**series_row(1, "Growing Pains"), "media_type": "tv"},
                    {"id": 9, "name": "Someone", "media_type": "person"},
                ]
            },
        },
    )

    person = await tmdb_client.person_details(6193)

    assert [item.id for item in person.combined_credits.cast] == [27205, 1]
