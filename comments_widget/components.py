"""
Widget components: the comment list, one comment item, the comment form.

Components hold state and expose actions (submit, toggle_edit, delete...);
`render()` turns that state into frozen view models. Markup is left to the
host.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from common.validators import validate_comment_content

from .fetch import PaginatedFetcher, ResourceFetcher
from .http import Transport
from .models import Comment
from .state import ItemState, prepend, remove, replace, toggle

logger = logging.getLogger(__name__)

COLLECTION_URL = "/api/comments"
HELP_TEXT = "Les commentaires non conformes à notre code de conduite seront modérés."
DATE_FORMAT = "%d %b %Y %H:%M"


# ------------------------------------------------------------------
# View models
# ------------------------------------------------------------------


@dataclass(frozen=True)
class TitleView:
    count: int
    label: str


@dataclass(frozen=True)
class FormView:
    value: str
    error: str | None
    help: str
    submit_label: str
    show_legend: bool
    show_cancel: bool
    loading: bool


@dataclass(frozen=True)
class CommentView:
    id: int
    author: str
    published_at: str
    state: ItemState
    content: str | None
    form: FormView | None
    show_controls: bool
    delete_disabled: bool


@dataclass(frozen=True)
class WidgetView:
    title: TitleView
    form: FormView | None
    comments: tuple[CommentView, ...]
    show_more: bool
    more_disabled: bool


def title_label(count: int) -> str:
    """e.g. "1 commentaire", "3 commentaires"."""
    return f"{count} commentaire{'s' if count > 1 else ''}"


# ------------------------------------------------------------------
# Components
# ------------------------------------------------------------------


class CommentForm:
    """
    Create or edit form.

    - no comment bound: POST {content, post} to the collection URL
    - comment bound: PUT {content} to the comment's URL, pre-filled
    """

    def __init__(
        self,
        transport: Transport,
        *,
        on_comment: Callable[[Comment], None],
        post: int | None = None,
        comment: Comment | None = None,
        on_cancel: Callable[[], None] | None = None,
        collection_url: str = COLLECTION_URL,
    ) -> None:
        if comment is None and post is None:
            raise ValueError("A create form needs the post id.")

        self.post = post
        self.comment = comment
        self.on_comment = on_comment
        self.on_cancel = on_cancel
        self.value = comment.content if comment is not None else ""
        self._saved: Comment | None = None

        if comment is not None:
            self.fetcher = ResourceFetcher(transport, comment.url, "PUT", self._on_success)
        else:
            self.fetcher = ResourceFetcher(transport, collection_url, "POST", self._on_success)

    @property
    def is_edit(self) -> bool:
        return self.comment is not None

    @property
    def errors(self) -> dict[str, str]:
        return self.fetcher.errors

    @property
    def loading(self) -> bool:
        return self.fetcher.loading

    def change(self, value: str) -> None:
        """Typing in the field clears its error."""
        self.value = value
        self.fetcher.clear_error("content")

    def submit(self) -> Comment | None:
        """
        Validate locally, then send one request.

        Returns:
            Comment | None: The saved comment, or None when validation
            (local or server-side) failed.
        """
        try:
            content = validate_comment_content(self.value)
        except ValueError as exc:
            self.fetcher.set_error("content", str(exc))
            return None

        payload: dict[str, Any] = {"content": content}
        if not self.is_edit:
            payload["post"] = self.post

        self._saved = None
        self.fetcher.load(payload)
        return self._saved

    def cancel(self) -> None:
        if self.on_cancel is not None:
            self.on_cancel()

    def _on_success(self, data: Any) -> None:
        saved = Comment.from_api(data)
        self._saved = saved
        if not self.is_edit:
            self.value = ""
        self.on_comment(saved)

    def render(self) -> FormView:
        error = self.errors.get("content")
        return FormView(
            value=self.value,
            error=error,
            help=error or HELP_TEXT,
            submit_label="Editer" if self.is_edit else "Envoyer",
            show_legend=not self.is_edit,
            show_cancel=self.on_cancel is not None,
            loading=self.loading,
        )


class CommentItem:
    """
    One comment, in VIEW or EDIT state.

    Edit/Delete controls exist only for the comment's author; the server
    still enforces the real rule.
    """

    def __init__(
        self,
        transport: Transport,
        comment: Comment,
        *,
        can_edit: bool,
        on_delete: Callable[[Comment], None],
        on_update: Callable[[Comment, Comment], None],
    ) -> None:
        self.transport = transport
        self.comment = comment
        self.can_edit = can_edit
        self.on_delete = on_delete
        self.on_update = on_update
        self.state = ItemState.VIEW
        self.form: CommentForm | None = None
        self._deleter = ResourceFetcher(transport, comment.url, "DELETE", self._on_deleted)

    def toggle_edit(self) -> ItemState:
        if not self.can_edit:
            return self.state

        self.state = toggle(self.state)
        if self.state is ItemState.EDIT:
            self.form = CommentForm(
                self.transport,
                comment=self.comment,
                on_comment=self._on_updated,
                on_cancel=self.toggle_edit,
            )
        else:
            self.form = None
        return self.state

    def delete(self) -> None:
        # The delete control is hidden while editing.
        if self.can_edit and self.state is ItemState.VIEW:
            self._deleter.load()

    def _on_deleted(self, _data: Any) -> None:
        self.on_delete(self.comment)

    def _on_updated(self, updated: Comment) -> None:
        previous = self.comment
        self.comment = updated
        self.on_update(updated, previous)
        self.toggle_edit()

    def render(self) -> CommentView:
        editing = self.state is ItemState.EDIT
        published = self.comment.published_at
        return CommentView(
            id=self.comment.id,
            author=self.comment.author.username,
            published_at=published.strftime(DATE_FORMAT) if published else "",
            state=self.state,
            content=None if editing else self.comment.content,
            form=self.form.render() if editing and self.form is not None else None,
            show_controls=self.can_edit and not editing,
            delete_disabled=self._deleter.loading,
        )


class CommentList:
    """
    Owns the comment list of one post.

    The list only changes through add_comment (prepend), delete_comment
    (remove by id) and update_comment (replace by id), plus load_more().
    """

    def __init__(
        self,
        transport: Transport,
        post: int,
        user: int | None = None,
        *,
        collection_url: str = COLLECTION_URL,
        page_size: int | None = None,
    ) -> None:
        self.transport = transport
        self.post = post
        self.user = user

        url = f"{collection_url}?post={post}"
        if page_size is not None:
            url = f"{url}&page_size={page_size}"
        self.fetcher = PaginatedFetcher(transport, url)

        self.form: CommentForm | None = None
        if user is not None:
            self.form = CommentForm(
                transport,
                post=post,
                on_comment=self.add_comment,
                collection_url=collection_url,
            )

        self.active = False
        self.torn_down = False
        self._started = False
        self._items: dict[int, CommentItem] = {}

    @property
    def comments(self) -> tuple[Comment, ...]:
        return self.fetcher.items

    @property
    def count(self) -> int:
        return self.fetcher.count

    # -------------------------
    # lifecycle
    # -------------------------

    def activate(self) -> None:
        """Start the component; the first activation loads page one."""
        if self.torn_down:
            raise RuntimeError("Cannot activate a torn down comment list.")
        self.active = True
        if not self._started:
            self._started = True
            self.fetcher.load()

    def deactivate(self) -> None:
        self.active = False
        self.torn_down = True
        self._items.clear()

    def load_more(self) -> bool:
        return self.fetcher.load()

    # -------------------------
    # list mutations
    # -------------------------

    def add_comment(self, comment: Comment) -> None:
        self.fetcher.items = prepend(self.fetcher.items, comment)
        self.fetcher.count += 1

    def delete_comment(self, comment: Comment) -> None:
        before = len(self.fetcher.items)
        self.fetcher.items = remove(self.fetcher.items, comment)
        if len(self.fetcher.items) < before:
            self.fetcher.count = max(0, self.fetcher.count - 1)
        self._items.pop(comment.id, None)

    def update_comment(self, updated: Comment, previous: Comment) -> None:
        self.fetcher.items = replace(self.fetcher.items, updated, previous)

    # -------------------------
    # children
    # -------------------------

    def can_edit(self, comment: Comment) -> bool:
        return self.user is not None and comment.author.id == self.user

    def item(self, comment: Comment) -> CommentItem:
        """Return the item component for a comment, keeping its state across renders."""
        item = self._items.get(comment.id)
        if item is None:
            item = CommentItem(
                self.transport,
                comment,
                can_edit=self.can_edit(comment),
                on_delete=self.delete_comment,
                on_update=self.update_comment,
            )
            self._items[comment.id] = item
        elif item.comment is not comment and item.state is ItemState.VIEW:
            item.comment = comment
        return item

    def items(self) -> list[CommentItem]:
        return [self.item(comment) for comment in self.comments]

    def render(self) -> WidgetView:
        if not self.active:
            raise RuntimeError("The comment list is not active.")

        return WidgetView(
            title=TitleView(count=self.count, label=title_label(self.count)),
            form=self.form.render() if self.form is not None else None,
            comments=tuple(item.render() for item in self.items()),
            show_more=self.fetcher.has_more,
            more_disabled=self.fetcher.loading,
        )
