import os
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# IMPORTANT:
# Set env vars BEFORE importing movies_library.core.config / movies_library.main (settings load at import time)
os.environ["ENV"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./movies_library_test.db")
os.environ.setdefault("TMDB_API_KEY", "test-api-key")
os.environ.setdefault("CORS_ORIGINS", "http://localhost:3000")

from movies_library.main import app as fastapi_app  # noqa: E402
from movies_library.api.deps import get_db, get_tmdb_client  # noqa: E402
from movies_library.core.config import TMDBConfig  # noqa: E402
from movies_library.db.base_class import Base  # noqa: E402
from movies_library.services.tmdb import TMDBClient  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def db_session(engine):
    factory = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
    async with factory() as session:
        yield session


class FakeTMDB:
    """Routes TMDB paths to canned payloads and records every request."""

    def __init__(self):
        self.routes: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, payload: Any = None, *, status_code: int = 200) -> None:
        self.routes[path] = (status_code, payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/3")
        if path not in self.routes:
            return httpx.Response(404, json={"status_message": "The resource you requested could not be found."})
        status_code, payload = self.routes[path]
        if isinstance(payload, Exception):
            raise payload
        return httpx.Response(status_code, json=payload)

    def last_params(self, path: str) -> dict[str, str]:
        for request in reversed(self.requests):
            if request.url.path.removeprefix("/3") == path:
                return dict(request.url.params)
        raise AssertionError(f"no request for {path}")


@pytest.fixture
def fake_tmdb():
    return FakeTMDB()


@pytest.fixture
def tmdb_client(fake_tmdb):
    return TMDBClient(TMDBConfig(api_key="test-api-key"), transport=httpx.MockTransport(fake_tmdb.handler))


@pytest.fixture
async def client(db_session, tmdb_client):
    async def _override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = _override_get_db
    fastapi_app.dependency_overrides[get_tmdb_client] = lambda: tmdb_client

    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    fastapi_app.dependency_overrides.pop(get_db, None)
    fastapi_app.dependency_overrides.pop(get_tmdb_client, None)


# --- Manual clock for debounce timers ---

class FakeTimer:
    def __init__(self, when: float, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    def __init__(self):
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def __call__(self, delay: float, callback, *args) -> FakeTimer:
        timer = FakeTimer(self.now + delay, callback, args)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = sorted(
            (t for t in self.timers if not t.cancelled and t.when <= self.now),
            key=lambda t: t.when,
        )
        for timer in due:
            self.timers.remove(timer)
            timer.callback(*timer.args)


@pytest.fixture
def fake_scheduler():
    return FakeScheduler()

