"""
API routing.

All the routes declared here are reachable under /api/
because they're included by config/urls.py.
"""

from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework import permissions

urlpatterns = [
    # OpenAPI schema (JSON) + Swagger UI
    path(
        "schema",
        SpectacularAPIView.as_view(permission_classes=[permissions.AllowAny]),
        name="schema",
    ),
    path("docs", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    # Auth / JWT
    path("auth/", include(("apps.auth.urls", "auth"), namespace="auth")),

    # API resources
    path("", include(("apps.posts.urls", "posts"), namespace="posts")),
    path("", include(("apps.comments.urls", "comments"), namespace="comments")),
]
