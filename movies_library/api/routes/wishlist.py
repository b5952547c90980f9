from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from movies_library.api.deps import get_db, get_wishlist_store
from movies_library.schemas.wishlist import (
    WishlistAddRequest,
    WishlistMembershipOut,
    WishlistMutationOut,
    WishlistOut,
)
from movies_library.services.wishlist import WishlistStore

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.get("", response_model=WishlistOut)
async def list_wishlist_route(store: WishlistStore = Depends(get_wishlist_store)):
    items = await store.list_entries()
    return WishlistOut(items=items, count=len(items))


@router.get("/{movie_id}", response_model=WishlistMembershipOut)
async def wishlist_membership_route(movie_id: int, store: WishlistStore = Depends(get_wishlist_store)):
    return WishlistMembershipOut(id=movie_id, in_wishlist=await store.contains(movie_id))


@router.post("", response_model=WishlistMutationOut, status_code=201)
async def add_wishlist_route(
    payload: WishlistAddRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    store: WishlistStore = Depends(get_wishlist_store),
):
    changed = await store.add(payload.to_entry())
    if changed:
        await db.commit()
    else:
        # already saved; nothing was created
        response.status_code = 200
    return WishlistMutationOut(changed=changed, count=len(await store.list_entries()))


@router.delete("/{movie_id}", response_model=WishlistMutationOut)
async def remove_wishlist_route(
    movie_id: int,
    db: AsyncSession = Depends(get_db),
    store: WishlistStore = Depends(get_wishlist_store),
):
    changed = await store.remove(movie_id)
    if changed:
        await db.commit()
    return WishlistMutationOut(changed=changed, count=len(await store.list_entries()))
