"""
Posts app views.

Routes:
- GET /posts        -> anyone
- GET /posts/{id}   -> anyone

Posts are managed from the admin; the API only exposes them so the
widget host can resolve a post id and its comment count.
"""

from __future__ import annotations

from django.db.models import Count, QuerySet
from rest_framework import permissions, viewsets

from .models import Post
from .serializers import PostSerializer


class PostViewSet(viewsets.ReadOnlyModelViewSet):
    """Read-only post endpoints, annotated with their comment count."""

    serializer_class = PostSerializer
    permission_classes = [permissions.AllowAny]

    # Base queryset for schema generation / model inference (drf-spectacular).
    queryset = Post.objects.none()

    def get_queryset(self) -> QuerySet[Post]:
        if getattr(self, "swagger_fake_view", False):
            return Post.objects.all()

        return (
            Post.objects.select_related("author")
            .annotate(comments_count=Count("comments", distinct=True))
            .order_by("-created_at", "-id")
        )
