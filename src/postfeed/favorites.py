from __future__ import annotations

from threading import RLock
from typing import Dict, List

from .schemas import Post


class FavoritesStore:
    """
    Thread-safe in-memory list of favorited posts, in insertion order.

    Lives as long as the process; nothing is persisted.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[int, Post] = {}

    def add(self, post: Post) -> bool:
        """Add ``post``. Returns False if it was already a favorite."""
        with self._lock:
            if post.id in self._items:
                return False
            self._items[post.id] = post
            return True

    def remove(self, post_id: int) -> bool:
        """Remove a favorite by post id. Return True if removed, False if absent."""
        with self._lock:
            return self._items.pop(post_id, None) is not None

    def is_favorite(self, post_id: int) -> bool:
        with self._lock:
            return post_id in self._items

    def list(self) -> List[Post]:
        with self._lock:
            return list(self._items.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
