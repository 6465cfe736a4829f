from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ..auth import get_context, require_session
from ..context import AppContext
from ..schemas import Comment, CommentCountOut, FetchStateOut, Post
from ..utils import state_envelope

router = APIRouter(
    prefix="/api/v1/posts",
    tags=["posts"],
    dependencies=[Depends(require_session)],
)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=FetchStateOut[Post],
    summary="Posts feed",
    description=(
        "Return the posts feed state. The first call loads page 1; later calls "
        "return the current state without fetching."
    ),
)
async def get_posts(ctx: AppContext = Depends(get_context)) -> FetchStateOut[Post]:
    """
    Return the feed, loading the first page on first access.
    """
    controller = ctx.posts
    if not controller.started:
        await controller.load()
    return FetchStateOut[Post](**state_envelope(controller.state, controller.cursor))


# PUBLIC_INTERFACE
@router.post(
    "/refresh",
    response_model=FetchStateOut[Post],
    summary="Refresh posts",
    description="Reset pagination to page 1 and replace the feed with a fresh first page.",
)
async def refresh_posts(ctx: AppContext = Depends(get_context)) -> FetchStateOut[Post]:
    """
    Pull-to-refresh / retry.
    """
    controller = ctx.posts
    state = await controller.load(refresh=True)
    return FetchStateOut[Post](**state_envelope(state, controller.cursor))


# PUBLIC_INTERFACE
@router.post(
    "/more",
    response_model=FetchStateOut[Post],
    summary="Load more posts",
    description="Append the next page. No-op when the feed is exhausted or a fetch is running.",
)
async def more_posts(ctx: AppContext = Depends(get_context)) -> FetchStateOut[Post]:
    """
    Infinite scroll.
    """
    controller = ctx.posts
    state = await controller.load_more()
    return FetchStateOut[Post](**state_envelope(state, controller.cursor))


# PUBLIC_INTERFACE
@router.get(
    "/{post_id}/comments",
    response_model=FetchStateOut[Comment],
    summary="Comments of a post",
    description="Return the comments state of a post, loading page 1 when the detail view opens.",
)
async def get_comments(post_id: int, ctx: AppContext = Depends(get_context)) -> FetchStateOut[Comment]:
    """
    Detail view comments.
    """
    controller = ctx.comments_for(post_id)
    if not controller.started:
        await controller.load()
    return FetchStateOut[Comment](**state_envelope(controller.state, controller.cursor))


# PUBLIC_INTERFACE
@router.post(
    "/{post_id}/comments/refresh",
    response_model=FetchStateOut[Comment],
    summary="Refresh comments",
)
async def refresh_comments(post_id: int, ctx: AppContext = Depends(get_context)) -> FetchStateOut[Comment]:
    """
    Reload the first page of comments.
    """
    controller = ctx.comments_for(post_id)
    state = await controller.load(refresh=True)
    return FetchStateOut[Comment](**state_envelope(state, controller.cursor))


# PUBLIC_INTERFACE
@router.post(
    "/{post_id}/comments/more",
    response_model=FetchStateOut[Comment],
    summary="Load more comments",
)
async def more_comments(post_id: int, ctx: AppContext = Depends(get_context)) -> FetchStateOut[Comment]:
    """
    Append the next page of comments.
    """
    controller = ctx.comments_for(post_id)
    if not controller.started:
        state = await controller.load()
    else:
        state = await controller.load_more()
    return FetchStateOut[Comment](**state_envelope(state, controller.cursor))


# PUBLIC_INTERFACE
@router.delete(
    "/{post_id}/comments",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Close comments",
    description="Discard the comments state of a post when its detail view closes.",
    responses={
        204: {"description": "Comments state discarded"},
        404: {"description": "No comments state for this post"},
    },
)
async def close_comments(post_id: int, ctx: AppContext = Depends(get_context)) -> None:
    """
    Cancel any in-flight comments request and forget the state.
    """
    if not ctx.close_comments(post_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No comments loaded for this post")
    return None


# PUBLIC_INTERFACE
@router.get(
    "/{post_id}/comment-count",
    response_model=CommentCountOut,
    summary="Comment count",
    description="Number of comments on a post, shown on feed items.",
)
async def comment_count(post_id: int, ctx: AppContext = Depends(get_context)) -> CommentCountOut:
    """
    Fetch every comment of the post and count them.
    """
    counter = ctx.comment_counter(post_id)
    state = await counter.load()
    return CommentCountOut(post_id=post_id, count=counter.count, loading=state.loading, error=state.error)
