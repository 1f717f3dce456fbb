from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models
from django.utils import timezone

if TYPE_CHECKING:
    # Import only for typing (avoids runtime import cycles)
    from django.db.models.manager import Manager

    from apps.comments.models import Comment


class Post(models.Model):
    """Post resource.

    Comments are attached to exactly one post; the comments API only ever
    references a post by its id.

    Fields:
        title: Post title.
        content: Free-text body.
        author: Writer of the post.
        created_at: Creation timestamp.
    """

    title = models.CharField(max_length=200, blank=False, null=False)
    content = models.TextField(blank=True)
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        # user.posts.all() -> posts written by that user
        related_name="posts",
    )

    if TYPE_CHECKING:
        objects: "Manager[Post]"
        author_id: int

        # Reverse relation from Comment.post (related_name="comments")
        comments: "Manager[Comment]"

    class Meta:
        ordering = ("-created_at",)

    def __str__(self) -> str:
        """Return a readable string representation for admin/debug."""
        return str(self.title)
