from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..auth import get_context
from ..context import AppContext
from ..errors import AuthFailure
from ..schemas import Credentials, SessionOut

router = APIRouter(
    prefix="/api/v1/auth",
    tags=["auth"],
)


def _session_out(ctx: AppContext) -> SessionOut:
    session = ctx.sessions.session
    return SessionOut(
        is_authenticated=session.is_authenticated,
        username=session.username,
        authenticated_at=session.authenticated_at,
    )


# PUBLIC_INTERFACE
@router.post(
    "/register",
    response_model=SessionOut,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an account. The current session is not changed.",
    responses={
        201: {"description": "Account created"},
        409: {"description": "Registration failed"},
    },
)
def register(payload: Credentials, ctx: AppContext = Depends(get_context)) -> SessionOut:
    """
    Register a new username/password pair.
    """
    if not ctx.sessions.register(payload.username, payload.password):
        raise AuthFailure("Registration failed", status_code=status.HTTP_409_CONFLICT)
    return _session_out(ctx)


# PUBLIC_INTERFACE
@router.post(
    "/login",
    response_model=SessionOut,
    summary="Login",
    description="Check the credentials and open an authenticated session.",
    responses={
        200: {"description": "Logged in"},
        401: {"description": "Login failed"},
    },
)
def login(payload: Credentials, ctx: AppContext = Depends(get_context)) -> SessionOut:
    """
    Log in. A failed attempt leaves the current session as it was.
    """
    if not ctx.sessions.login(payload.username, payload.password):
        raise AuthFailure("Login failed", status_code=status.HTTP_401_UNAUTHORIZED)
    return _session_out(ctx)


# PUBLIC_INTERFACE
@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout",
    description="Close the session and discard every screen state. Idempotent.",
)
async def logout(ctx: AppContext = Depends(get_context)) -> None:
    """
    Log out and reset the feed, search and comments views.
    """
    ctx.sessions.logout()
    ctx.reset_views()
    return None


# PUBLIC_INTERFACE
@router.get(
    "/session",
    response_model=SessionOut,
    summary="Current session",
)
def current_session(ctx: AppContext = Depends(get_context)) -> SessionOut:
    """
    Return whether the user is logged in, for the navigation layer.
    """
    return _session_out(ctx)
