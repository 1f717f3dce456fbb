"""
End-to-end widget tests against the real comments API.

The widget talks to DRF's APIClient through a small transport adapter, so
pagination, validation errors and the EDIT_COMMENT rule all come from the
server code.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model
from rest_framework.test import APIClient, APITestCase

from apps.comments.models import Comment as CommentModel
from apps.posts.models import Post
from comments_widget.components import CommentList
from comments_widget.exceptions import ApiError
from comments_widget.element import CommentsElement, ManualVisibilityObserver
from comments_widget.fetch import PaginatedFetcher
from comments_widget.http import ApiResponse

User = get_user_model()


class APIClientTransport:
    """Transport adapter routing widget requests through DRF's test client."""

    def __init__(self, client: APIClient) -> None:
        self.client = client

    def request(self, method: str, url: str, payload: Any = None) -> ApiResponse:
        send = getattr(self.client, method.lower())
        if payload is None:
            response = send(url)
        else:
            response = send(url, payload, format="json")
        data = response.json() if response.content else None
        return ApiResponse(response.status_code, data)


class CommentWidgetIntegrationTests(APITestCase):
    """Widget flows: anonymous browsing, author edits, forbidden edits."""

    def setUp(self) -> None:
        self.alice = User.objects.create_user(username="alice", password="password123")
        self.bob = User.objects.create_user(username="bob", password="password123")
        self.post = Post.objects.create(title="Widget", author=self.alice)

        # Oldest first, so the API returns 5, 4, 3, 2, 1.
        self.comments = [
            CommentModel.objects.create(
                post=self.post,
                author=self.alice if index % 2 else self.bob,
                content=f"Comment number {index}",
            )
            for index in range(1, 6)
        ]

    def transport_for(self, user=None) -> APIClientTransport:
        client = APIClient()
        if user is not None:
            client.force_authenticate(user=user)
        return APIClientTransport(client)

    def test_paginated_fetch_collects_all_pages_in_order(self) -> None:
        fetcher = PaginatedFetcher(
            self.transport_for(), f"/api/comments?post={self.post.pk}&page_size=2"
        )

        while fetcher.load():
            pass

        expected = [comment.pk for comment in reversed(self.comments)]
        self.assertEqual([c.id for c in fetcher.items], expected)
        self.assertEqual(fetcher.count, 5)
        self.assertFalse(fetcher.has_more)

    def test_anonymous_viewer_gets_read_only_widget(self) -> None:
        observer = ManualVisibilityObserver()
        element = CommentsElement({"post": str(self.post.pk)}, self.transport_for(), observer)
        element.connect()
        observer.notify_visible()

        view = element.render()

        self.assertIsNone(view.form)
        self.assertEqual(view.title.count, 5)
        self.assertTrue(all(not c.show_controls for c in view.comments))

    def test_author_creates_edits_and_deletes(self) -> None:
        widget = CommentList(self.transport_for(self.alice), self.post.pk, self.alice.pk)
        widget.activate()

        # create
        widget.form.change("A fresh comment")
        created = widget.form.submit()
        self.assertIsNotNone(created)
        self.assertEqual(widget.comments[0].id, created.id)
        self.assertEqual(widget.count, 6)

        # edit
        item = widget.item(created)
        item.toggle_edit()
        item.form.change("An edited comment")
        item.form.submit()
        self.assertEqual(widget.comments[0].content, "An edited comment")
        self.assertEqual(
            CommentModel.objects.get(pk=created.id).content, "An edited comment"
        )

        # delete
        widget.item(widget.comments[0]).delete()
        self.assertNotIn(created.id, [c.id for c in widget.comments])
        self.assertFalse(CommentModel.objects.filter(pk=created.id).exists())

    def test_server_validation_error_reaches_form(self) -> None:
        widget = CommentList(self.transport_for(self.alice), 999_999, self.alice.pk)
        widget.activate()

        widget.form.change("Valid text but unknown post")
        self.assertIsNone(widget.form.submit())
        self.assertIn("post", widget.form.errors)

    def test_non_author_edit_is_refused_by_server(self) -> None:
        # Bob bypasses the hidden controls: the server still says no.
        widget = CommentList(self.transport_for(self.bob), self.post.pk, self.alice.pk)
        widget.activate()
        alice_comment = next(c for c in widget.comments if c.author.id == self.alice.pk)

        item = widget.item(alice_comment)
        item.toggle_edit()
        item.form.change("Not my comment")

        with self.assertRaises(ApiError) as ctx:
            item.form.submit()

        self.assertEqual(ctx.exception.status_code, 403)
        self.assertEqual(
            CommentModel.objects.get(pk=alice_comment.id).content, alice_comment.content
        )
