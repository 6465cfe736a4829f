from __future__ import annotations

from fastapi import APIRouter, Depends

from ..auth import get_context, require_session
from ..context import AppContext
from ..models import Session
from ..schemas import ProfileOut

router = APIRouter(
    prefix="/api/v1/profile",
    tags=["profile"],
)


# PUBLIC_INTERFACE
@router.get("/", response_model=ProfileOut, summary="Profile")
def get_profile(
    session: Session = Depends(require_session),
    ctx: AppContext = Depends(get_context),
) -> ProfileOut:
    return ProfileOut(
        username=session.username,
        authenticated_at=session.authenticated_at,
        favorites_count=len(ctx.favorites),
    )
