"""
JWT endpoints as the comments widget uses them: log in, post with the
access token, refresh, then revoke the refresh token on sign-out.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.posts.models import Post

from .views import REFRESH_INVALID_MESSAGE, REFRESH_REQUIRED_MESSAGE

User = get_user_model()

PASSWORD = "password123"


class TokenLifecycleTests(APITestCase):
    """Login, refresh and revocation around the comments API."""

    @classmethod
    def setUpTestData(cls) -> None:
        cls.alice = User.objects.create_user(username="alice", password=PASSWORD)
        cls.bob = User.objects.create_user(username="bob", password=PASSWORD)
        cls.post = Post.objects.create(title="Hello", author=cls.alice)

    def tokens_for(self, user) -> dict:
        resp = self.client.post(
            reverse("auth:login"),
            {"username": user.username, "password": PASSWORD},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        return resp.data

    def revoke(self, refresh: str | None, *, as_user=None):
        if as_user is not None:
            self.client.force_authenticate(user=as_user)
        payload = {} if refresh is None else {"refresh": refresh}
        return self.client.post(reverse("auth:logout"), payload, format="json")

    def test_login_rejects_wrong_password(self) -> None:
        resp = self.client.post(
            reverse("auth:login"),
            {"username": "alice", "password": "wrong-password"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_access_token_authenticates_comment_creation(self) -> None:
        tokens = self.tokens_for(self.alice)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

        resp = self.client.post(
            reverse("comments:comments-list"),
            {"content": "Signed in via JWT", "post": self.post.pk},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["author"]["id"], self.alice.pk)

    def test_refresh_issues_new_access_token(self) -> None:
        tokens = self.tokens_for(self.alice)

        resp = self.client.post(
            reverse("auth:refresh"), {"refresh": tokens["refresh"]}, format="json"
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.data["access"])

    def test_revoke_requires_authentication(self) -> None:
        resp = self.revoke("anything")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_revoke_requires_a_token(self) -> None:
        resp = self.revoke(None, as_user=self.alice)

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["refresh"], [REFRESH_REQUIRED_MESSAGE])

    def test_revoke_rejects_garbage(self) -> None:
        resp = self.revoke("not-a-valid-token", as_user=self.alice)

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["refresh"], [REFRESH_INVALID_MESSAGE])

    def test_revoked_token_cannot_refresh_or_be_revoked_again(self) -> None:
        refresh = self.tokens_for(self.alice)["refresh"]

        self.assertEqual(
            self.revoke(refresh, as_user=self.alice).status_code,
            status.HTTP_204_NO_CONTENT,
        )
        self.assertEqual(
            self.revoke(refresh, as_user=self.alice).status_code,
            status.HTTP_400_BAD_REQUEST,
        )

        self.client.force_authenticate(user=None)
        resp = self.client.post(reverse("auth:refresh"), {"refresh": refresh}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_only_the_owner_can_revoke_a_token(self) -> None:
        refresh = self.tokens_for(self.alice)["refresh"]

        resp = self.revoke(refresh, as_user=self.bob)
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        # Still usable by its owner.
        resp = self.client.post(reverse("auth:refresh"), {"refresh": refresh}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
