from __future__ import annotations

from rest_framework import serializers

from .models import Post


class PostSerializer(serializers.ModelSerializer):
    """Read-only post representation (comments are fetched separately)."""

    author_id = serializers.IntegerField(source="author.id", read_only=True)
    author_username = serializers.CharField(source="author.username", read_only=True)
    comments_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Post
        fields = (
            "id",
            "title",
            "content",
            "author_id",
            "author_username",
            "comments_count",
            "created_at",
        )
        read_only_fields = fields
