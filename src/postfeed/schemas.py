from __future__ import annotations

from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

T = TypeVar("T")


# PUBLIC_INTERFACE
class Post(BaseModel):
    """
    A post as returned by the remote API.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "sunt aut facere repellat provident",
                "body": "quia et suscipit suscipit recusandae",
                "userId": 1,
            }
        },
    )

    id: int = Field(..., description="Unique identifier of the post")
    title: str = Field(..., description="Post title")
    body: str = Field(..., description="Post body")
    user_id: int = Field(..., alias="userId", description="Author identifier")


# PUBLIC_INTERFACE
class Comment(BaseModel):
    """
    A comment attached to a post.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "postId": 1,
                "name": "id labore ex et quam laborum",
                "email": "Eliseo@gardner.biz",
                "body": "laudantium enim quasi est quidem magnam",
            }
        },
    )

    id: int = Field(..., description="Unique identifier of the comment")
    post_id: int = Field(..., alias="postId", description="Identifier of the parent post")
    name: str = Field(..., description="Comment title")
    email: str = Field(..., description="Commenter email")
    body: str = Field(..., description="Comment body")


PostList = TypeAdapter(List[Post])
CommentList = TypeAdapter(List[Comment])


# PUBLIC_INTERFACE
class FetchStateOut(BaseModel, Generic[T]):
    """
    Snapshot of a fetch-state controller as served to screens.

    Fetch failures are reported in ``error``; the UI offers a retry.
    """

    model_config = ConfigDict(populate_by_name=True)

    data: List[T] = Field(default_factory=list, description="Items loaded so far")
    loading: bool = Field(..., description="A request is in flight")
    error: Optional[str] = Field(default=None, description="Message of the last failure, if any")
    has_more: bool = Field(..., alias="hasMore", description="More pages may be available")
    page: Optional[int] = Field(default=None, description="Next page that will be requested")
    limit: Optional[int] = Field(default=None, description="Page size")


# PUBLIC_INTERFACE
class CommentCountOut(BaseModel):
    """
    Number of comments on a post.
    """

    post_id: int = Field(..., alias="postId", description="Identifier of the post")
    count: int = Field(..., description="Number of comments")
    loading: bool = Field(..., description="A request is in flight")
    error: Optional[str] = Field(default=None, description="Message of the last failure, if any")

    model_config = ConfigDict(populate_by_name=True)


# PUBLIC_INTERFACE
class Credentials(BaseModel):
    """
    Username/password pair submitted by the auth screen.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"username": "alice", "password": "s3cret"}}
    )

    username: str = Field(..., description="Login name", min_length=1, max_length=150)
    password: str = Field(..., description="Password", min_length=1, max_length=1024)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """
        Strip whitespace and reject blank usernames.
        """
        s = v.strip()
        if not s:
            raise ValueError("username must not be blank")
        return s


# PUBLIC_INTERFACE
class SessionOut(BaseModel):
    """
    Current session as seen by the navigation layer.
    """

    model_config = ConfigDict(populate_by_name=True)

    is_authenticated: bool = Field(..., alias="isAuthenticated")
    username: Optional[str] = Field(default=None)
    authenticated_at: Optional[datetime] = Field(default=None, alias="authenticatedAt")


# PUBLIC_INTERFACE
class ProfileOut(BaseModel):
    """
    Data shown on the profile screen.
    """

    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., description="Logged in user")
    authenticated_at: Optional[datetime] = Field(default=None, alias="authenticatedAt")
    favorites_count: int = Field(..., alias="favoritesCount")


# PUBLIC_INTERFACE
class FavoriteStatusOut(BaseModel):
    """
    Whether a post is in the favorites list.
    """

    model_config = ConfigDict(populate_by_name=True)

    post_id: int = Field(..., alias="postId")
    is_favorite: bool = Field(..., alias="isFavorite")
