from __future__ import annotations

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from movies_library.models.storage_entry import StorageEntry


class StorageError(RuntimeError):
    pass


class KeyValueStorage(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value


class SqlStorage:
    """Key/value rows scoped to one client namespace.

    Writes are flushed, not committed; the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession, *, namespace: str):
        self.db = db
        self.namespace = namespace

    async def _load(self, key: str) -> StorageEntry | None:
        q = select(StorageEntry).where(
            StorageEntry.namespace == self.namespace,
            StorageEntry.key == key,
        )
        return (await self.db.execute(q)).scalar_one_or_none()

    async def get(self, key: str) -> str | None:
        try:
            row = await self._load(key)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not read {key!r}") from exc
        return row.value if row else None

    async def set(self, key: str, value: str) -> None:
        try:
            row = await self._load(key)
            if row is None:
                self.db.add(StorageEntry(namespace=self.namespace, key=key, value=value))
            else:
                row.value = value
            await self.db.flush()
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not write {key!r}") from exc
