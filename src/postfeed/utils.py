from __future__ import annotations

from typing import Any, Dict, Optional

from .models import FetchState, PageCursor


# PUBLIC_INTERFACE
def state_envelope(state: FetchState[Any], cursor: Optional[PageCursor] = None) -> Dict[str, Any]:
    """
    Build the standard response body for a fetch-state controller.

    Args:
        state: Current controller snapshot.
        cursor: Pagination cursor for paginated controllers, None otherwise.

    Returns:
        Dict with keys: data, loading, error, hasMore, page, limit.
    """
    return {
        "data": list(state.data),
        "loading": state.loading,
        "error": state.error,
        "hasMore": state.has_more,
        "page": cursor.page if cursor is not None else None,
        "limit": cursor.limit if cursor is not None else None,
    }
