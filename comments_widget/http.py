"""
HTTP transport for the comments widget.

Components never talk to `requests` directly: they receive a transport
exposing ``request(method, url, payload=None) -> ApiResponse``. The
default implementation is backed by a `requests.Session`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import urljoin

import requests

from .exceptions import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class ApiResponse:
    """Status code + decoded JSON body (None when the body is empty)."""

    status_code: int
    data: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(Protocol):
    def request(self, method: str, url: str, payload: Any = None) -> ApiResponse: ...


class RequestsTransport:
    """
    Transport backed by requests.

    Args:
        base_url (str): Site root, e.g. "https://blog.example.com/".
        token (str | None): JWT access token sent as "Bearer <token>".
        timeout (float): Per-request timeout in seconds.
        session (requests.Session | None): Shared session (cookies, pooling).
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def resolve(self, url: str) -> str:
        """Resolve relative resource paths; absolute `next` links pass through."""
        return urljoin(self.base_url, url)

    def headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, url: str, payload: Any = None) -> ApiResponse:
        target = self.resolve(url)
        try:
            response = self.session.request(
                method,
                target,
                json=payload,
                headers=self.headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, target, exc)
            raise TransportError(f"{method} {target} failed: {exc}") from exc

        logger.debug("%s %s -> %s", method, target, response.status_code)
        return ApiResponse(response.status_code, self._decode(response))

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text
