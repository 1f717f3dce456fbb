from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.urls import reverse
from rest_framework import serializers

from common.validators import COMMENT_REQUIRED_MESSAGE, validate_comment_content

from .models import Comment

logger = logging.getLogger(__name__)

User = get_user_model()


def drf_comment_content_validator(value: str) -> str:
    """
    DRF wrapper around the common comment content rule.

    Raises:
        serializers.ValidationError: If invalid.
    """
    try:
        return validate_comment_content(value)
    except ValueError as exc:
        raise serializers.ValidationError(str(exc)) from exc


class CommentAuthorSerializer(serializers.ModelSerializer):
    """User reference embedded in comments: only id + username."""

    class Meta:
        model = User
        fields = ("id", "username")
        read_only_fields = fields


class CommentSerializer(serializers.ModelSerializer):
    """
    Comment resource serializer (read + create).

    Rules:
    - author is forced from request.user
    - url is the resource identifier used by clients for PUT/DELETE
    """

    url = serializers.SerializerMethodField()
    author = CommentAuthorSerializer(read_only=True)
    content = serializers.CharField(
        validators=[drf_comment_content_validator],
        error_messages={
            "required": COMMENT_REQUIRED_MESSAGE,
            "blank": COMMENT_REQUIRED_MESSAGE,
            "null": COMMENT_REQUIRED_MESSAGE,
        },
    )

    class Meta:
        model = Comment
        fields = ("id", "url", "post", "author", "content", "published_at", "updated_at")
        read_only_fields = ("id", "url", "author", "published_at", "updated_at")

    def get_url(self, obj: Comment) -> str:
        """Return the comment's resource path, e.g. /api/comments/12."""
        return reverse("comments:comments-detail", kwargs={"pk": obj.pk})

    def create(self, validated_data: dict[str, Any]) -> Comment:
        """Create a comment authored by the request user."""
        request = self.context["request"]
        comment = Comment(author=request.user, **validated_data)

        try:
            comment.save()
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.message_dict) from exc

        logger.info(
            "Comment %s created on post %s by user %s",
            comment.pk,
            comment.post_id,
            comment.author_id,
        )
        return comment


class CommentUpdateSerializer(CommentSerializer):
    """
    Comment update serializer.

    Same payload as CommentSerializer, but the post cannot be moved:
    only content is writable.
    """

    class Meta(CommentSerializer.Meta):
        read_only_fields = CommentSerializer.Meta.read_only_fields + ("post",)

    def update(self, instance: Comment, validated_data: dict[str, Any]) -> Comment:
        """Update the content (convert model errors to 400)."""
        instance.content = validated_data.get("content", instance.content)

        try:
            instance.save()
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.message_dict) from exc

        logger.info("Comment %s updated by user %s", instance.pk, instance.author_id)
        return instance
