from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..auth import get_context, require_session
from ..context import AppContext
from ..schemas import FavoriteStatusOut, Post

router = APIRouter(
    prefix="/api/v1/favorites",
    tags=["favorites"],
    dependencies=[Depends(require_session)],
)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=List[Post],
    summary="List favorites",
    description="Favorited posts in the order they were added.",
)
def list_favorites(ctx: AppContext = Depends(get_context)) -> List[Post]:
    """
    List favorites.
    """
    return ctx.favorites.list()


# PUBLIC_INTERFACE
@router.get(
    "/{post_id}",
    response_model=FavoriteStatusOut,
    summary="Favorite status",
)
def favorite_status(post_id: int, ctx: AppContext = Depends(get_context)) -> FavoriteStatusOut:
    """
    Whether a post is a favorite.
    """
    return FavoriteStatusOut(post_id=post_id, is_favorite=ctx.favorites.is_favorite(post_id))


# PUBLIC_INTERFACE
@router.put(
    "/{post_id}",
    response_model=Post,
    status_code=status.HTTP_201_CREATED,
    summary="Add favorite",
    description="Add a post to favorites. Adding an existing favorite is a no-op (200).",
    responses={
        200: {"description": "Already a favorite"},
        201: {"description": "Favorite added"},
        400: {"description": "Path and body ids differ"},
    },
)
def add_favorite(post_id: int, payload: Post, response: Response, ctx: AppContext = Depends(get_context)) -> Post:
    """
    Add a favorite.
    """
    if payload.id != post_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="post id mismatch")
    if not ctx.favorites.add(payload):
        response.status_code = status.HTTP_200_OK
    return payload


# PUBLIC_INTERFACE
@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove favorite",
    responses={
        204: {"description": "Favorite removed"},
        404: {"description": "Favorite not found"},
    },
)
def remove_favorite(post_id: int, ctx: AppContext = Depends(get_context)) -> None:
    """
    Remove a favorite. Returns 204 on success, 404 if it was not a favorite.
    """
    if not ctx.favorites.remove(post_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Favorite not found")
    return None
