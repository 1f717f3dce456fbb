"""
URL configuration for the project: /admin backoffice and the /api routes.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    # All API endpoints live under /api/ (no trailing slashes)
    path("api/", include("config.api.urls")),
]
