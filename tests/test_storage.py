import pytest

from movies_library.services.storage import MemoryStorage, SqlStorage

pytestmark = pytest.mark.anyio


async def test_memory_storage_get_and_set():
    storage = MemoryStorage({"a": "1"})

    await storage.set("b", "2")

    assert await storage.get("a") == "1"
    assert await storage.get("b") == "2"
    assert await storage.get("missing") is None


async def test_sql_storage_upserts_within_namespace(db_session):
    storage = SqlStorage(db_session, namespace="client-a")

    assert await storage.get("movieWishlist") is None

    await storage.set("movieWishlist", "[]")
    await storage.set("movieWishlist", '[{"id": 1}]')
    await db_session.commit()

    assert await storage.get("movieWishlist") == '[{"id": 1}]'


async def test_sql_storage_namespaces_are_isolated(db_session):
    first = SqlStorage(db_session, namespace="client-a")
    second = SqlStorage(db_session, namespace="client-b")

    await first.set("movieWishlist", "a")
    await second.set("movieWishlist", "b")
    await db_session.commit()

    assert await first.get("movieWishlist") == "a"
    assert await second.get("movieWishlist") == "b"
