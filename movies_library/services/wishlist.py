from __future__ import annotations

import json
import logging
from typing import Callable

from pydantic import TypeAdapter, ValidationError

from movies_library.schemas.wishlist import WishlistEntry
from movies_library.services.storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

WISHLIST_KEY = "movieWishlist"

Listener = Callable[[], None]

_entries_adapter = TypeAdapter(list[WishlistEntry])


def decode_wishlist(raw: str | None) -> list[WishlistEntry]:
    """Parse the persisted JSON array; anything malformed reads as empty."""
    if not raw:
        return []
    try:
        return _entries_adapter.validate_json(raw, context={"persisted": True})
    except ValidationError:
        logger.info("ignoring malformed wishlist payload")
        return []


def encode_wishlist(entries: list[WishlistEntry]) -> str:
    return json.dumps([entry.to_storage() for entry in entries])


class WishlistStore:
    """Deduplicated, insertion-ordered wishlist kept under one storage key.

    The whole list is rewritten on every mutation. Listeners are called
    synchronously after each mutation that changed the list.
    """

    def __init__(self, storage: KeyValueStorage | None, *, key: str = WISHLIST_KEY):
        self.storage = storage
        self.key = key
        self._entries: list[WishlistEntry] | None = None
        self._listeners: list[Listener] = []

    async def _read(self) -> list[WishlistEntry]:
        if self.storage is None:
            return []
        try:
            raw = await self.storage.get(self.key)
        except StorageError:
            logger.exception("wishlist read failed key=%s", self.key)
            return []
        return decode_wishlist(raw)

    async def _write(self, entries: list[WishlistEntry]) -> bool:
        if self.storage is None:
            return False
        try:
            await self.storage.set(self.key, encode_wishlist(entries))
        except StorageError:
            logger.exception("wishlist write failed key=%s", self.key)
            return False
        self._entries = entries
        self._notify()
        return True

    async def list_entries(self) -> list[WishlistEntry]:
        if self._entries is None:
            self._entries = await self._read()
        return list(self._entries)

    async def contains(self, movie_id: int) -> bool:
        return any(entry.id == movie_id for entry in await self.list_entries())

    async def add(self, entry: WishlistEntry) -> bool:
        entries = await self._read()
        if any(existing.id == entry.id for existing in entries):
            self._entries = entries
            return False
        return await self._write([*entries, entry])

    async def remove(self, movie_id: int) -> bool:
        entries = await self._read()
        remaining = [entry for entry in entries if entry.id != movie_id]
        if len(remaining) == len(entries):
            self._entries = entries
            return False
        return await self._write(remaining)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("wishlist listener failed")
