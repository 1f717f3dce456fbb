"""
Comments app test suite.

Coverage targets:
- models.py
  - Comment.clean()/save() content validation
- voters.py
  - CommentVoter / can_edit: PERMIT for the author, DENY for anyone else,
    ABSTAIN outside (EDIT_COMMENT, Comment)
- serializers.py
  - CommentSerializer payload shape
- views.py
  - /comments list: public, filtered by post, paginated newest first
  - POST /comments: authenticated, author forced, field-keyed 400
  - PUT/PATCH/DELETE /comments/{id}: author only (401 anonymous, 403 others)
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import ValidationError
from django.urls import NoReverseMatch, reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.posts.models import Post
from common.security import Vote, is_granted
from common.validators import COMMENT_TOO_SHORT_MESSAGE

from .models import Comment
from .serializers import CommentSerializer
from .voters import EDIT_COMMENT, CommentVoter, can_edit

User = get_user_model()

DEFAULT_PASSWORD = "password123"


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def create_user(*, username: str, **extra_fields: Any) -> User:
    """Create a regular user."""
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password=DEFAULT_PASSWORD,
        **extra_fields,
    )


def create_post(*, author: User, title: str = "Post") -> Post:
    """Create a post."""
    return Post.objects.create(title=title, author=author)


def create_comment(*, post: Post, author: User, content: str = "Hello world") -> Comment:
    """Create a comment."""
    return Comment.objects.create(post=post, author=author, content=content)


def list_url(**params: Any) -> str:
    """Build /api/comments with optional query params."""
    url = reverse("comments:comments-list")
    if params:
        query = "&".join(f"{key}={value}" for key, value in params.items())
        url = f"{url}?{query}"
    return url


def detail_url(comment: Comment) -> str:
    return reverse("comments:comments-detail", kwargs={"pk": comment.pk})


# ---------------------------------------------------------------------------
# Model tests
# ---------------------------------------------------------------------------


class CommentModelTests(APITestCase):
    """Unit tests for Comment model validation rules."""

    def setUp(self) -> None:
        self.author = create_user(username="author_m")
        self.post = create_post(author=self.author)

    def test_save_rejects_short_content(self) -> None:
        comment = Comment(post=self.post, author=self.author, content="abcd")

        with self.assertRaises(ValidationError) as ctx:
            comment.save()

        self.assertIn("content", ctx.exception.message_dict)

    def test_save_rejects_blank_content(self) -> None:
        comment = Comment(post=self.post, author=self.author, content="      ")

        with self.assertRaises(ValidationError) as ctx:
            comment.save()

        self.assertIn("content", ctx.exception.message_dict)

    def test_save_strips_content(self) -> None:
        comment = create_comment(post=self.post, author=self.author, content="  Hello!  ")
        self.assertEqual(comment.content, "Hello!")

    def test_comments_deleted_with_post(self) -> None:
        create_comment(post=self.post, author=self.author)
        self.post.delete()
        self.assertFalse(Comment.objects.exists())


# ---------------------------------------------------------------------------
# Authorization rule tests
# ---------------------------------------------------------------------------


class CommentVoterTests(APITestCase):
    """The EDIT_COMMENT rule: author only, abstain outside its scope."""

    def setUp(self) -> None:
        self.author = create_user(username="author_v")
        self.other = create_user(username="other_v")
        self.staff = create_user(username="staff_v", is_staff=True)
        self.post = create_post(author=self.author)
        self.comment = create_comment(post=self.post, author=self.author)

    def test_author_is_permitted(self) -> None:
        self.assertIs(can_edit(self.author, EDIT_COMMENT, self.comment), Vote.PERMIT)

    def test_other_user_is_denied(self) -> None:
        self.assertIs(can_edit(self.other, EDIT_COMMENT, self.comment), Vote.DENY)

    def test_staff_gets_no_special_treatment(self) -> None:
        self.assertIs(can_edit(self.staff, EDIT_COMMENT, self.comment), Vote.DENY)

    def test_anonymous_is_denied(self) -> None:
        self.assertIs(can_edit(AnonymousUser(), EDIT_COMMENT, self.comment), Vote.DENY)
        self.assertIs(can_edit(None, EDIT_COMMENT, self.comment), Vote.DENY)

    def test_abstains_on_other_action(self) -> None:
        self.assertIs(can_edit(self.author, "DELETE_POST", self.comment), Vote.ABSTAIN)
        self.assertIs(can_edit(self.other, "EDIT_POST", self.comment), Vote.ABSTAIN)

    def test_abstains_on_non_comment_subject(self) -> None:
        self.assertIs(can_edit(self.author, EDIT_COMMENT, self.post), Vote.ABSTAIN)
        self.assertIs(can_edit(self.author, EDIT_COMMENT, None), Vote.ABSTAIN)

    def test_vote_does_not_query_database(self) -> None:
        comment = Comment.objects.get(pk=self.comment.pk)
        with self.assertNumQueries(0):
            CommentVoter().vote(self.author, EDIT_COMMENT, comment)

    def test_is_granted_denies_when_all_voters_abstain(self) -> None:
        voters = (CommentVoter(),)
        self.assertFalse(is_granted(self.author, "OTHER", self.comment, voters))
        self.assertTrue(
            is_granted(
                self.author, "OTHER", self.comment, voters, allow_if_all_abstain=True
            )
        )
        self.assertTrue(is_granted(self.author, EDIT_COMMENT, self.comment, voters))
        self.assertFalse(is_granted(self.other, EDIT_COMMENT, self.comment, voters))


# ---------------------------------------------------------------------------
# Serializer tests
# ---------------------------------------------------------------------------


class CommentSerializerTests(APITestCase):
    """Serializer behavior tests (not view wiring)."""

    def test_comment_serializer_payload(self) -> None:
        author = create_user(username="author_s")
        post = create_post(author=author)
        comment = create_comment(post=post, author=author)

        data = CommentSerializer(comment).data

        for key in ("id", "url", "post", "author", "content", "published_at", "updated_at"):
            self.assertIn(key, data)
        self.assertEqual(data["author"], {"id": author.pk, "username": "author_s"})
        self.assertEqual(data["url"], f"/api/comments/{comment.pk}")
        self.assertEqual(data["post"], post.pk)


# ---------------------------------------------------------------------------
# Viewset / API tests
# ---------------------------------------------------------------------------


class CommentViewSetTests(APITestCase):
    """Integration tests for /comments endpoints and the EDIT_COMMENT rule."""

    def setUp(self) -> None:
        """
        Dataset:
        - author: 2 comments on post
        - other: 1 comment on post, 1 comment on another post
        """
        self.author = create_user(username="author")
        self.other = create_user(username="other")

        self.post = create_post(author=self.author, title="First")
        self.other_post = create_post(author=self.other, title="Second")

        self.comment_a1 = create_comment(post=self.post, author=self.author, content="First!")
        self.comment_b = create_comment(post=self.post, author=self.other, content="Second!")
        self.comment_a2 = create_comment(post=self.post, author=self.author, content="Third!")
        self.comment_elsewhere = create_comment(
            post=self.other_post, author=self.other, content="Elsewhere"
        )

    # -------------------------
    # list
    # -------------------------

    def test_list_is_public_and_filtered_by_post(self) -> None:
        resp = self.client.get(list_url(post=self.post.pk))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["count"], 3)
        ids = [row["id"] for row in resp.data["results"]]
        self.assertEqual(
            ids, [self.comment_a2.pk, self.comment_b.pk, self.comment_a1.pk]
        )

    def test_list_paginates_with_next_link(self) -> None:
        resp = self.client.get(list_url(post=self.post.pk, page_size=2))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data["results"]), 2)
        self.assertIsNotNone(resp.data["next"])

        resp = self.client.get(list_url(post=self.post.pk, page_size=2, page=2))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([row["id"] for row in resp.data["results"]], [self.comment_a1.pk])
        self.assertIsNone(resp.data["next"])

    def test_list_rejects_non_integer_post(self) -> None:
        resp = self.client.get(list_url(post="abc"))
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("post", resp.data)

    def test_retrieve_is_public(self) -> None:
        resp = self.client.get(detail_url(self.comment_b))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["content"], "Second!")

    # -------------------------
    # create
    # -------------------------

    def test_create_requires_authentication(self) -> None:
        resp = self.client.post(
            list_url(), {"content": "Anonymous", "post": self.post.pk}, format="json"
        )
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_forces_author_from_request_user(self) -> None:
        self.client.force_authenticate(user=self.other)
        resp = self.client.post(
            list_url(),
            {"content": "Nice post", "post": self.post.pk, "author": self.author.pk},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["author"]["id"], self.other.pk)
        self.assertEqual(resp.data["url"], f"/api/comments/{resp.data['id']}")
        self.assertTrue(
            Comment.objects.filter(pk=resp.data["id"], author=self.other).exists()
        )

    def test_create_returns_field_keyed_errors(self) -> None:
        self.client.force_authenticate(user=self.other)
        resp = self.client.post(list_url(), {"content": "abc"}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["content"], [COMMENT_TOO_SHORT_MESSAGE])
        self.assertIn("post", resp.data)

    # -------------------------
    # update
    # -------------------------

    def test_put_allowed_for_author(self) -> None:
        self.client.force_authenticate(user=self.author)
        resp = self.client.put(
            detail_url(self.comment_a1), {"content": "Edited content"}, format="json"
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["content"], "Edited content")
        self.assertEqual(resp.data["id"], self.comment_a1.pk)
        self.assertEqual(resp.data["url"], detail_url(self.comment_a1))

    def test_put_cannot_move_comment_to_another_post(self) -> None:
        self.client.force_authenticate(user=self.author)
        resp = self.client.put(
            detail_url(self.comment_a1),
            {"content": "Edited content", "post": self.other_post.pk},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.comment_a1.refresh_from_db()
        self.assertEqual(self.comment_a1.post_id, self.post.pk)

    def test_put_denied_for_other_user(self) -> None:
        self.client.force_authenticate(user=self.other)
        resp = self.client.put(
            detail_url(self.comment_a1), {"content": "Hijacked!"}, format="json"
        )

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.comment_a1.refresh_from_db()
        self.assertEqual(self.comment_a1.content, "First!")

    def test_put_denied_for_anonymous(self) -> None:
        resp = self.client.put(
            detail_url(self.comment_a1), {"content": "Hijacked!"}, format="json"
        )
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_put_short_content_returns_400(self) -> None:
        self.client.force_authenticate(user=self.author)
        resp = self.client.put(detail_url(self.comment_a1), {"content": "no"}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("content", resp.data)

    def test_patch_allowed_for_author(self) -> None:
        self.client.force_authenticate(user=self.author)
        resp = self.client.patch(
            detail_url(self.comment_a2), {"content": "Patched!"}, format="json"
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["content"], "Patched!")

    # -------------------------
    # delete
    # -------------------------

    def test_delete_allowed_for_author(self) -> None:
        self.client.force_authenticate(user=self.other)
        resp = self.client.delete(detail_url(self.comment_b))

        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Comment.objects.filter(pk=self.comment_b.pk).exists())

    def test_delete_denied_for_other_user(self) -> None:
        self.client.force_authenticate(user=self.author)
        resp = self.client.delete(detail_url(self.comment_b))

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Comment.objects.filter(pk=self.comment_b.pk).exists())

    def test_delete_denied_for_anonymous(self) -> None:
        resp = self.client.delete(detail_url(self.comment_b))
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)


class CommentRoutingTests(APITestCase):
    """The /api/ root view belongs to the posts router only."""

    def test_comments_router_has_no_root_view(self) -> None:
        with self.assertRaises(NoReverseMatch):
            reverse("comments:api-root")

        self.assertEqual(reverse("posts:api-root"), "/api/")
        self.assertEqual(reverse("comments:comments-list"), "/api/comments")
