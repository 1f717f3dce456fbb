"""
Common DRF pagination configuration.

List endpoints return the page-number envelope
``{"count", "next", "previous", "results"}``; clients read "has more"
from ``next`` being non-null.
"""

from __future__ import annotations

from django.conf import settings
from rest_framework.pagination import PageNumberPagination


class DefaultPagination(PageNumberPagination):
    """
    Default pagination class.

    Query params:
        - ?page=1
        - ?page_size=10 (optional, capped)
    """

    page_size = getattr(settings, "COMMENTS_PAGE_SIZE", 10)
    page_size_query_param = "page_size"
    max_page_size = 100
