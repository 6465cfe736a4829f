from __future__ import annotations

NETWORK_ERROR_MESSAGE = "Network error"


class FetchError(RuntimeError):
    """Base error for failed calls to the remote posts API."""


class NetworkError(FetchError):
    """Transport-level failure (connection refused, DNS, timeout...)."""

    def __init__(self, message: str = NETWORK_ERROR_MESSAGE) -> None:
        super().__init__(message)


class HttpStatusError(FetchError):
    """The remote API answered with a non-2xx status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP error! status: {status_code}")
        self.status_code = status_code


class PersistenceError(RuntimeError):
    """Credential store initialization or statement failure."""


class AuthFailure(RuntimeError):
    """
    Login or registration was rejected.

    The message is deliberately generic: callers cannot tell a wrong password
    from an unknown or already taken username.
    """

    def __init__(self, message: str = "Authentication failed", status_code: int = 401) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

