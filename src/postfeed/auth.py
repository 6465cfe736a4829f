from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from .context import AppContext
from .models import Session


# PUBLIC_INTERFACE
def get_context(request: Request) -> AppContext:
    """Return the AppContext created by the application lifespan."""
    return request.app.state.context


# PUBLIC_INTERFACE
def require_session(ctx: AppContext = Depends(get_context)) -> Session:
    """
    FastAPI dependency gating the main flow behind a logged-in session.

    Behavior:
    - If the session is authenticated, returns it.
    - Otherwise raises 401 so the client falls back to the auth flow.

    Usage:
        router = APIRouter(dependencies=[Depends(require_session)])
    """
    session = ctx.sessions.session
    if not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return session
