import pytest

from movies_library.api.deps import COOKIE_NAME
from movies_library.services.query_state import FILTERS_DISABLED_MESSAGE
from movies_library.services.search import FETCH_FAILED_MESSAGE
from tests.payloads import movie_row, page_payload, person_row, series_row

pytestmark = pytest.mark.anyio


INCEPTION = {
    "id": 27205,
    "title": "Inception",
    "poster_path": "/inception.jpg",
    "release_date": "2010-07-15",
    "vote_average": 8.4,
}


async def test_health(client):
    r = await client.get("/health")

    assert r.status_code == 200
    assert r.json() == {"ok": True}


async def test_search_route_returns_cards_and_canonical_query(client, fake_tmdb):
    fake_tmdb.add("/search/movie", page_payload([movie_row(27205, "Inception")], total_pages=3))

    r = await client.get("/search", params={"q": "inception", "genreId": "28", "page": "1"})

    assert r.status_code == 200
    body = r.json()
    assert body["mode"] == "search"
    assert body["query_string"] == "q=inception&genres=28&page=1"
    assert body["notice"] == FILTERS_DISABLED_MESSAGE
    assert body["total_pages"] == 3
    assert body["results"][0]["link"] == "/movie/27205"
    assert body["results"][0]["wishlistable"] is True


async def test_search_route_ignores_non_ascii_genre_digits(client, fake_tmdb):
    fake_tmdb.add("/discover/movie", page_payload([movie_row(1, "Heat")]))

    r = await client.get("/search?genres=28,%C2%B2")

    assert r.status_code == 200
    assert r.json()["query_string"] == "genres=28&page=1"
    assert fake_tmdb.last_params("/discover/movie")["with_genres"] == "28"


async def test_search_route_reports_upstream_failure(client, fake_tmdb):
    fake_tmdb.add("/discover/movie", {}, status_code=500)

    r = await client.get("/search?genres=80")

    assert r.status_code == 200
    assert r.json()["error"] == FETCH_FAILED_MESSAGE
    assert r.json()["results"] == []


async def test_home_sections_survive_a_failing_listing(client, fake_tmdb):
    fake_tmdb.add("/movie/now_playing", page_payload([movie_row(1, "Heat")]))
    fake_tmdb.add("/movie/popular", page_payload([movie_row(i, f"Movie {i}") for i in range(1, 13)]))
    fake_tmdb.add("/movie/top_rated", {}, status_code=500)
    fake_tmdb.add("/tv/popular", page_payload([series_row(1396, "Breaking Bad")]))
    fake_tmdb.add("/tv/top_rated", page_payload([]))
    fake_tmdb.add("/person/popular", page_payload([person_row(6193, "Leonardo DiCaprio")]))

    r = await client.get("/home")

    assert r.status_code == 200
    sections = {s["key"]: s["items"] for s in r.json()["sections"]}
    assert len(sections["popular_movies"]) == 10
    assert sections["top_rated_movies"] == []
    assert sections["popular_series"][0]["kind"] == "tv"
    assert sections["popular_people"][0]["link"] == "/person/6193"


async def test_movies_listing_page_bounds(client, fake_tmdb):
    fake_tmdb.add("/movie/popular", page_payload([movie_row(1, "Heat")], page=2, total_pages=900))

    r = await client.get("/movies", params={"page": 2})
    assert r.status_code == 200
    assert r.json()["total_pages"] == 500

    r = await client.get("/movies", params={"page": 501})
    assert r.status_code == 422


async def test_movie_details_route(client, fake_tmdb):
    fake_tmdb.add(
        "/movie/27205",
        {
            **movie_row(27205, "Inception"),
            "runtime": 148,
            "credits": {
                "cast": [{"id": 6193, "name": "Leonardo DiCaprio", "character": "Cobb"}],
                "crew": [{"id": 525, "name": "Christopher Nolan", "job": "Director", "department": "Directing"}],
            },
        },
    )

    r = await client.get("/movie/27205")

    assert r.status_code == 200
    body = r.json()
    assert body["runtime"] == "2h 28m"
    assert body["director"]["name"] == "Christopher Nolan"
    assert body["stars"][0]["role"] == "Cobb"
    assert body["wishlist_entry"]["id"] == 27205


async def test_missing_titles_are_404(client, fake_tmdb):
    fake_tmdb.add("/tv/1", {}, status_code=500)

    assert (await client.get("/movie/1")).status_code == 404
    r = await client.get("/series/1")
    assert r.status_code == 404
    assert r.json()["detail"] == "Series not found"
    assert (await client.get("/person/1")).status_code == 404


async def test_genres_fall_back_to_empty_list(client, fake_tmdb):
    fake_tmdb.add("/genre/movie/list", {}, status_code=500)

    r = await client.get("/genres/movie")

    assert r.status_code == 200
    assert r.json() == []


async def test_wishlist_flow_is_scoped_to_cookie(client):
    r = await client.get("/wishlist")
    assert r.status_code == 200
    assert r.json() == {"items": [], "count": 0}
    assert COOKIE_NAME in r.cookies

    r = await client.post("/wishlist", json=INCEPTION)
    assert r.status_code == 201
    assert r.json() == {"changed": True, "count": 1}

    r = await client.post("/wishlist", json=INCEPTION)
    assert r.status_code == 200
    assert r.json() == {"changed": False, "count": 1}

    r = await client.get("/wishlist/27205")
    assert r.json() == {"id": 27205, "in_wishlist": True}

    items = (await client.get("/wishlist")).json()["items"]
    assert [item["title"] for item in items] == ["Inception"]

    r = await client.delete("/wishlist/550")
    assert r.json() == {"changed": False, "count": 1}

    r = await client.delete("/wishlist/27205")
    assert r.json() == {"changed": True, "count": 0}


async def test_wishlist_is_not_shared_between_clients(client):
    await client.post("/wishlist", json=INCEPTION)

    client.cookies.clear()
    r = await client.get("/wishlist/27205")

    assert r.json() == {"id": 27205, "in_wishlist": False}


async def test_wishlist_rejects_invalid_entries(client):
    r = await client.post("/wishlist", json={"id": 0, "title": ""})

    assert r.status_code == 422
