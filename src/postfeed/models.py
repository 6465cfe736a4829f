from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Generic, List, Optional, TypedDict, TypeVar

T = TypeVar("T")


# PUBLIC_INTERFACE
class UserRecord(TypedDict):
    """
    A row of the local ``users`` table.

    Fields:
    - id: Auto-increment integer identifier
    - username: Unique login name
    - password: Salted password hash string (never plaintext)
    """

    id: int
    username: str
    password: str


# PUBLIC_INTERFACE
@dataclass
class PageCursor:
    """
    Pagination progress for one query.

    ``page`` is the next page to request (>= 1); ``limit`` the page size (> 0).
    Only the owning controller mutates it.
    """

    page: int = 1
    limit: int = 20

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be > 0")

    def reset(self) -> None:
        self.page = 1


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class FetchState(Generic[T]):
    """
    Immutable snapshot of a fetch-state controller.

    Controllers swap the whole snapshot on every transition, so a reader
    never observes a half-applied update.
    """

    data: List[T] = field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None
    has_more: bool = True

    def evolve(self, **changes) -> "FetchState[T]":
        return replace(self, **changes)


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Session:
    """
    The user's login state. Anonymous when ``username`` is None.

    Held by a single SessionManager and replaced wholesale on login/logout.
    """

    username: Optional[str] = None
    authenticated_at: Optional[datetime] = None

    @property
    def is_authenticated(self) -> bool:
        return self.username is not None
