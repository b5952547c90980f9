from __future__ import annotations

from collections.abc import AsyncGenerator
import uuid

from fastapi import Cookie, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from movies_library.core.config import settings
from movies_library.db.session import get_db_session
from movies_library.services.storage import SqlStorage
from movies_library.services.tmdb import TMDBClient
from movies_library.services.wishlist import WishlistStore

COOKIE_NAME = settings.wishlist_cookie_name
COOKIE_MAX_AGE_SECONDS = 60 * 60 * 24 * 365 * 5

_tmdb_client: TMDBClient | None = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_db_session():
        yield session


def get_tmdb_client() -> TMDBClient:
    global _tmdb_client
    if _tmdb_client is None:
        _tmdb_client = TMDBClient(settings.tmdb_config())
    return _tmdb_client


def _valid_client_id(value: str | None) -> str | None:
    if not value:
        return None
    try:
        return str(uuid.UUID(value))
    except ValueError:
        return None


async def get_client_id(
    response: Response,
    client_id: str | None = Cookie(default=None, alias=COOKIE_NAME),
) -> str:
    existing = _valid_client_id(client_id)
    if existing:
        return existing

    # First visit (or a tampered cookie): issue a new browser identity.
    issued = str(uuid.uuid4())
    response.set_cookie(
        COOKIE_NAME,
        issued,
        max_age=COOKIE_MAX_AGE_SECONDS,
        httponly=True,
        samesite="lax",
        secure=settings.env not in {"local", "test"},
    )
    return issued


async def get_wishlist_store(
    db: AsyncSession = Depends(get_db),
    client_id: str = Depends(get_client_id),
) -> WishlistStore:
    return WishlistStore(SqlStorage(db, namespace=client_id))
