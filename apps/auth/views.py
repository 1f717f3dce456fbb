"""
Sign-out for the comments widget.

Login and refresh are simplejwt's own views (see urls.py). Logout revokes
a refresh token, and only the user it was issued to may revoke it: the
same owner-only rule the comments API applies to edits.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema, inline_serializer
from rest_framework import serializers, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import RefreshToken

logger = logging.getLogger(__name__)

REFRESH_REQUIRED_MESSAGE = "Le refresh token est obligatoire."
REFRESH_INVALID_MESSAGE = "Refresh token invalide, expiré ou déjà révoqué."
REFRESH_NOT_OWNED_MESSAGE = "Ce refresh token appartient à un autre utilisateur."


def token_owner_id(token: RefreshToken) -> str:
    return str(token.get(api_settings.USER_ID_CLAIM, ""))


@extend_schema(
    tags=["auth"],
    operation_id="auth_logout",
    request=inline_serializer("LogoutRequest", {"refresh": serializers.CharField()}),
    responses={
        204: OpenApiResponse(description="Refresh token revoked."),
        400: OpenApiResponse(description="Refresh token missing, invalid or already revoked."),
        401: OpenApiResponse(description="Not authenticated."),
        403: OpenApiResponse(description="Refresh token issued to another user."),
    },
)
@api_view(["POST"])
@permission_classes([IsAuthenticated])
def revoke_refresh_token(request: Request) -> Response:
    raw = str(request.data.get("refresh") or "").strip()
    if not raw:
        raise ValidationError({"refresh": [REFRESH_REQUIRED_MESSAGE]})

    try:
        token = RefreshToken(raw)
    except TokenError:
        raise ValidationError({"refresh": [REFRESH_INVALID_MESSAGE]})

    user_id = str(getattr(request.user, api_settings.USER_ID_FIELD))
    if token_owner_id(token) != user_id:
        logger.debug("User %s tried to revoke a token of user %s", user_id, token_owner_id(token))
        raise PermissionDenied(REFRESH_NOT_OWNED_MESSAGE)

    token.blacklist()
    logger.info("Refresh token revoked for user %s", user_id)
    return Response(status=status.HTTP_204_NO_CONTENT)
