from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from apps.posts.models import Post
from common.validators import validate_comment_content

if TYPE_CHECKING:
    from django.db.models.manager import Manager


class Comment(models.Model):
    """
    Stores a comment attached to a single post.

    Rules enforced here:
    - content is required and at least 5 characters long (stripped).
    - id, post and author never change after creation; edits only touch
      content (and updated_at).
    """

    content = models.TextField(blank=False)

    published_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name="comments",
    )

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="comments",
    )

    if TYPE_CHECKING:
        objects: "Manager[Comment]"
        post_id: int
        author_id: int

    class Meta:
        # Newest first; id breaks ties between identical timestamps.
        ordering = ("-published_at", "-id")

    def clean(self) -> None:
        """
        Validate the comment content.

        The stored content is the stripped text.
        """
        super().clean()

        try:
            self.content = validate_comment_content(self.content)
        except ValueError as exc:
            raise ValidationError({"content": str(exc)}) from exc

    def save(self, *args, **kwargs) -> None:
        """Run validation before saving."""
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self) -> str:
        """Readable label for admin/debug."""
        return f"Comment #{self.pk} on post #{self.post_id}"
