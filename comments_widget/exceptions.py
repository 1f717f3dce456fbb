from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """A non-validation failure returned by the comments API."""

    def __init__(self, status_code: int, data: Any = None, message: str | None = None) -> None:
        super().__init__(message or f"API request failed with status {status_code}")
        self.status_code = status_code
        self.data = data


class TransportError(ApiError):
    """The request never produced an HTTP response (network, timeout...)."""

    def __init__(self, message: str) -> None:
        super().__init__(0, None, message)
