"""
Comments app views.

Routes:
- GET    /comments?post={id}&page={n} -> anyone (paginated, newest first)
- GET    /comments/{id}               -> anyone
- POST   /comments                    -> authenticated (author = request.user)
- PUT    /comments/{id}               -> EDIT_COMMENT granted (author only)
- PATCH  /comments/{id}               -> EDIT_COMMENT granted (author only)
- DELETE /comments/{id}               -> EDIT_COMMENT granted (author only)
"""

from __future__ import annotations

import logging

from django.db.models import QuerySet
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import permissions, viewsets
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import BasePermission
from rest_framework.serializers import BaseSerializer

from .models import Comment
from .permissions import CanEditComment
from .serializers import CommentSerializer, CommentUpdateSerializer

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(
        parameters=[
            OpenApiParameter(
                name="post",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Only return comments attached to this post id.",
            ),
        ],
    ),
)
class CommentViewSet(viewsets.ModelViewSet):
    """
    Comment endpoints.

    Security model:
    - list/retrieve: public
    - create: authenticated
    - update/partial_update/destroy: authenticated + EDIT_COMMENT vote
    """

    # Base queryset for schema generation / model inference (drf-spectacular).
    queryset = Comment.objects.none()

    def get_queryset(self) -> QuerySet[Comment]:
        """
        Return comments, newest first.

        The list is filtered by `?post=` when provided; a non-integer value
        is a 400 keyed on "post".
        """
        if getattr(self, "swagger_fake_view", False):
            return Comment.objects.all()

        qs: QuerySet[Comment] = Comment.objects.select_related("author").order_by(
            "-published_at", "-id"
        )

        if self.action != "list":
            return qs

        post_id = self.request.query_params.get("post")
        if post_id in (None, ""):
            return qs

        try:
            return qs.filter(post_id=int(post_id))
        except ValueError as exc:
            raise ValidationError(
                {"post": ["L'identifiant du post doit être un entier."]}
            ) from exc

    def get_permissions(self) -> list[BasePermission]:
        """
        Return permission instances based on the current action.

        - list/retrieve: anyone
        - create: authenticated
        - update/partial_update/destroy: authenticated + EDIT_COMMENT
        """
        if self.action in ("list", "retrieve"):
            return [permissions.AllowAny()]

        if self.action in ("update", "partial_update", "destroy"):
            return [permissions.IsAuthenticated(), CanEditComment()]

        return [permissions.IsAuthenticated()]

    def get_serializer_class(self) -> type[BaseSerializer]:
        """Use the content-only serializer for updates."""
        if self.action in ("update", "partial_update"):
            return CommentUpdateSerializer
        return CommentSerializer

    def perform_destroy(self, instance: Comment) -> None:
        comment_id = instance.pk
        instance.delete()
        logger.info("Comment %s deleted by user %s", comment_id, self.request.user.pk)
