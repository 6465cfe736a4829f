from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..auth import get_context, require_session
from ..context import AppContext
from ..schemas import FetchStateOut, Post
from ..utils import state_envelope

router = APIRouter(
    prefix="/api/v1/search",
    tags=["search"],
    dependencies=[Depends(require_session)],
)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=FetchStateOut[Post],
    summary="Search posts",
    description=(
        "Search posts by free text. A blank query issues no request and returns "
        "the current results. Requests time out after the configured search timeout."
    ),
)
async def search_posts(
    q: Optional[str] = Query(None, max_length=200, description="Search text"),
    ctx: AppContext = Depends(get_context),
) -> FetchStateOut[Post]:
    """
    Run a search immediately; screens debounce keystrokes before calling.

    In-process screens can feed keystrokes to ``SearchController.submit()``
    instead, which waits for a quiet window before searching.
    """
    state = await ctx.search.search(q or "")
    return FetchStateOut[Post](**state_envelope(state))
