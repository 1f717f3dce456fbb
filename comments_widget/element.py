"""
Mount point of the widget.

`CommentsElement` plays the role of the `<post-comments data-post data-user>`
element: it reads its dataset, waits until a visibility observer reports
it on screen, then builds and activates a `CommentList`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from .components import COLLECTION_URL, CommentList, WidgetView
from .http import Transport

logger = logging.getLogger(__name__)


class VisibilityObserver:
    """Notifies registered callbacks once the element becomes visible."""

    def on_visible(self, callback: Callable[[], None]) -> None:
        raise NotImplementedError

    def disconnect(self) -> None:
        raise NotImplementedError


class ManualVisibilityObserver(VisibilityObserver):
    """The host calls notify_visible() when the element scrolls into view."""

    def __init__(self) -> None:
        self._callbacks: list[Callable[[], None]] = []

    def on_visible(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def notify_visible(self) -> None:
        for callback in list(self._callbacks):
            callback()

    def disconnect(self) -> None:
        self._callbacks.clear()


class ImmediateVisibilityObserver(VisibilityObserver):
    """Treats the element as visible as soon as it is connected."""

    def on_visible(self, callback: Callable[[], None]) -> None:
        callback()

    def disconnect(self) -> None:
        return None


def parse_dataset(dataset: Mapping[str, str]) -> tuple[int, int | None]:
    """
    Read data-post (required int) and data-user (optional int).

    A missing, empty, zero or non-numeric data-user means an anonymous viewer.

    Raises:
        ValueError: If data-post is missing or not an integer.
    """
    raw_post = dataset.get("post")
    if raw_post is None:
        raise ValueError("data-post is required.")
    try:
        post = int(raw_post)
    except ValueError as exc:
        raise ValueError(f"data-post must be an integer, got {raw_post!r}.") from exc

    try:
        user = int(dataset.get("user") or 0) or None
    except ValueError:
        user = None

    return post, user


class CommentsElement:
    """Lazily mounted comment widget."""

    def __init__(
        self,
        dataset: Mapping[str, str],
        transport: Transport,
        observer: VisibilityObserver | None = None,
        *,
        collection_url: str = COLLECTION_URL,
    ) -> None:
        self.post, self.user = parse_dataset(dataset)
        self.transport = transport
        self.observer = observer or ImmediateVisibilityObserver()
        self.collection_url = collection_url
        self.widget: CommentList | None = None

    def connect(self) -> None:
        """Element attached: wait for visibility before mounting."""
        self.observer.on_visible(self._on_visible)

    def disconnect(self) -> None:
        """Element detached: stop observing and tear the widget down."""
        self.observer.disconnect()
        if self.widget is not None:
            self.widget.deactivate()
            self.widget = None

    def _on_visible(self) -> None:
        self.observer.disconnect()
        if self.widget is not None:
            return

        logger.debug("Mounting comments for post %s (viewer %s)", self.post, self.user)
        self.widget = CommentList(
            self.transport,
            self.post,
            self.user,
            collection_url=self.collection_url,
        )
        self.widget.activate()

    def render(self) -> WidgetView | None:
        """Current render tree, or None while not mounted."""
        if self.widget is None:
            return None
        return self.widget.render()
