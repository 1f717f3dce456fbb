"""
Client-side comment resources, decoded from the API payloads.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp as emitted by the API ("Z" suffix allowed)."""
    if not value:
        return None
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class Author:
    """User reference: id + display name."""

    id: int
    username: str


@dataclass(frozen=True)
class Comment:
    """
    One comment as returned by the API.

    `id` and `url` never change for a given comment; an edit yields a new
    Comment with the same identity and a different content.
    """

    id: int
    url: str
    author: Author
    content: str
    published_at: datetime | None = None
    updated_at: datetime | None = None
    post: int | None = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Comment":
        author = data["author"]
        return cls(
            id=int(data["id"]),
            url=str(data["url"]),
            author=Author(id=int(author["id"]), username=str(author["username"])),
            content=str(data["content"]),
            published_at=parse_timestamp(data.get("published_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
            post=data.get("post"),
        )
