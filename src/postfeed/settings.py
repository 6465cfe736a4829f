from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "https://jsonplaceholder.typicode.com"
DEFAULT_POSTS_PAGE_SIZE = 20
DEFAULT_COMMENTS_PAGE_SIZE = 15
DEFAULT_SEARCH_TIMEOUT = 10.0
DEFAULT_SEARCH_DEBOUNCE = 0.5


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables (and a local .env file).

    Env vars:
    - POSTFEED_API_BASE_URL: base URL of the remote posts API. Default jsonplaceholder
    - POSTFEED_AUTH_DB_PATH: path to the sqlite credential store. Default './data/auth.db'
    - POSTFEED_POSTS_PAGE_SIZE: posts per feed page (default: 20)
    - POSTFEED_COMMENTS_PAGE_SIZE: comments per page (default: 15)
    - POSTFEED_SEARCH_TIMEOUT: search request timeout in seconds (default: 10)
    - POSTFEED_SEARCH_DEBOUNCE: search debounce window in seconds (default: 0.5)
    - POSTFEED_LOG_LEVEL: logging level name (default: INFO)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    """

    api_base_url: str
    auth_db_path: str
    posts_page_size: int
    comments_page_size: int
    search_timeout: float
    search_debounce: float
    log_level: str
    cors_allow_origins: List[str]


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_positive_int(value: str, default: int) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_positive_float(value: str, default: float) -> float:
    try:
        parsed = float(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        # Star will be handled in main via allow_origins=["*"]
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    load_dotenv()

    base_url = _get_env("POSTFEED_API_BASE_URL", DEFAULT_API_BASE_URL).strip().rstrip("/")
    db_path = _get_env("POSTFEED_AUTH_DB_PATH", "./data/auth.db").strip()

    log_level = _get_env("POSTFEED_LOG_LEVEL", "INFO").strip().upper()
    if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        # Fallback to INFO if unsupported
        log_level = "INFO"

    return Settings(
        api_base_url=base_url,
        auth_db_path=db_path,
        posts_page_size=_parse_positive_int(
            _get_env("POSTFEED_POSTS_PAGE_SIZE", str(DEFAULT_POSTS_PAGE_SIZE)), DEFAULT_POSTS_PAGE_SIZE
        ),
        comments_page_size=_parse_positive_int(
            _get_env("POSTFEED_COMMENTS_PAGE_SIZE", str(DEFAULT_COMMENTS_PAGE_SIZE)), DEFAULT_COMMENTS_PAGE_SIZE
        ),
        search_timeout=_parse_positive_float(
            _get_env("POSTFEED_SEARCH_TIMEOUT", str(DEFAULT_SEARCH_TIMEOUT)), DEFAULT_SEARCH_TIMEOUT
        ),
        search_debounce=_parse_positive_float(
            _get_env("POSTFEED_SEARCH_DEBOUNCE", str(DEFAULT_SEARCH_DEBOUNCE)), DEFAULT_SEARCH_DEBOUNCE
        ),
        log_level=log_level,
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
    )
