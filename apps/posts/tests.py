"""
Posts app tests: read-only endpoints with comment counts.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.comments.models import Comment

from .models import Post

User = get_user_model()


class PostViewSetTests(APITestCase):
    """GET /posts and /posts/{id}: public, annotated, not writable."""

    @classmethod
    def setUpTestData(cls) -> None:
        cls.author = User.objects.create_user(username="writer", password="password123")
        cls.post = Post.objects.create(title="Hello", author=cls.author)
        cls.empty_post = Post.objects.create(title="Empty", author=cls.author)
        for content in ("First!", "Second!"):
            Comment.objects.create(post=cls.post, author=cls.author, content=content)

    def test_retrieve_includes_comments_count(self) -> None:
        resp = self.client.get(reverse("posts:posts-detail", kwargs={"pk": self.post.pk}))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["comments_count"], 2)
        self.assertEqual(resp.data["author_username"], "writer")

    def test_list_is_public(self) -> None:
        resp = self.client.get(reverse("posts:posts-list"))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        counts = {row["id"]: row["comments_count"] for row in resp.data["results"]}
        self.assertEqual(counts, {self.post.pk: 2, self.empty_post.pk: 0})

    def test_posts_are_read_only(self) -> None:
        self.client.force_authenticate(user=self.author)
        resp = self.client.post(reverse("posts:posts-list"), {"title": "New"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
