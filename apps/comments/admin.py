from __future__ import annotations

from django.contrib import admin

from .models import Comment


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    """Admin configuration for Comment."""

    list_display = ("id", "post", "author", "published_at", "updated_at")
    list_filter = ("published_at", "updated_at")
    search_fields = ("content", "post__title", "author__username", "author__email")
    ordering = ("-published_at",)
    raw_id_fields = ("post", "author")
