"""
Fetchers backing the widget components.

- PaginatedFetcher: walks the comment list page by page.
- ResourceFetcher: one create/update/delete request with field errors.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .exceptions import ApiError
from .http import Transport
from .models import Comment
from .state import merge_page

logger = logging.getLogger(__name__)

VALIDATION_STATUSES = frozenset({400, 422})


class PaginatedFetcher:
    """
    Accumulates pages of comments from a list endpoint.

    The first load() requests `url`; later calls follow the `next` link
    of the previous page until the server reports none.
    """

    def __init__(self, transport: Transport, url: str) -> None:
        self.transport = transport
        self.url = url
        self.count = 0
        self.loading = False
        self._items: tuple[Comment, ...] = ()
        self._next_url: str | None = url
        self._loaded = False

    @property
    def items(self) -> tuple[Comment, ...]:
        return self._items

    @items.setter
    def items(self, value) -> None:
        self._items = tuple(value)

    @property
    def has_more(self) -> bool:
        return self._loaded and self._next_url is not None

    def load(self) -> bool:
        """
        Fetch the next page.

        Returns:
            bool: True if a page was appended. False when a load is already
            in flight, there is nothing left to fetch, or the request failed
            (the state is left untouched so the caller can retry).
        """
        if self.loading:
            logger.debug("Ignoring load() of %s: a request is in flight", self.url)
            return False

        if self._next_url is None:
            return False

        self.loading = True
        try:
            response = self.transport.request("GET", self._next_url)
        except ApiError as exc:
            logger.warning("Loading comments from %s failed: %s", self._next_url, exc)
            return False
        finally:
            self.loading = False

        if not response.ok or not isinstance(response.data, Mapping):
            logger.warning(
                "Loading comments from %s failed with status %s",
                self._next_url,
                response.status_code,
            )
            return False

        try:
            page = [Comment.from_api(row) for row in response.data.get("results", [])]
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Malformed comment page from %s: %r", self._next_url, exc)
            return False

        self._items = merge_page(self._items, page)
        self.count = int(response.data.get("count", len(self._items)))
        self._next_url = response.data.get("next")
        self._loaded = True
        return True


def extract_field_errors(data: Mapping[str, Any]) -> dict[str, str]:
    """
    Map field name -> first error message.

    Understands DRF payloads ({"content": ["msg", ...]}) and
    violation lists ({"violations": [{"propertyPath", "message"}]}).
    """
    errors: dict[str, str] = {}

    violations = data.get("violations")
    if isinstance(violations, list):
        for violation in violations:
            field = violation.get("propertyPath") or "non_field_errors"
            errors.setdefault(field, str(violation.get("message", "")))
        return errors

    for field, messages in data.items():
        if isinstance(messages, (list, tuple)):
            if messages:
                errors[field] = str(messages[0])
        elif messages is not None:
            errors[field] = str(messages)
    return errors


class ResourceFetcher:
    """
    Sends one request to a single resource.

    On success the callback receives the decoded body (None for 204).
    Validation failures (400/422) fill `errors` and return None; any other
    failure raises ApiError.
    """

    def __init__(
        self,
        transport: Transport,
        url: str,
        method: str,
        on_success: Callable[[Any], None] | None = None,
    ) -> None:
        self.transport = transport
        self.url = url
        self.method = method.upper()
        self.on_success = on_success
        self.loading = False
        self.errors: dict[str, str] = {}

    def load(self, payload: Any = None) -> Any:
        if self.loading:
            logger.debug("Ignoring %s %s: a request is in flight", self.method, self.url)
            return None

        self.loading = True
        try:
            response = self.transport.request(self.method, self.url, payload)
        finally:
            self.loading = False

        if response.ok:
            self.errors = {}
            if self.on_success is not None:
                self.on_success(response.data)
            return response.data

        if response.status_code in VALIDATION_STATUSES and isinstance(response.data, Mapping):
            self.errors = extract_field_errors(response.data)
            return None

        logger.warning("%s %s failed with status %s", self.method, self.url, response.status_code)
        raise ApiError(response.status_code, response.data)

    def set_error(self, field: str, message: str) -> None:
        self.errors = {**self.errors, field: message}

    def clear_error(self, field: str) -> None:
        if field in self.errors:
            self.errors = {key: value for key, value in self.errors.items() if key != field}
