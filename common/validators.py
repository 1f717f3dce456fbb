"""
Common validation helpers shared across the project.

Keep these functions framework-agnostic (no DRF / no Django imports),
so they can be reused in:
- Django model clean()
- DRF serializers
- the comments widget form (client-side validation)
- pure unit tests
"""

from __future__ import annotations

from typing import Final

MIN_COMMENT_LENGTH: Final[int] = 5

COMMENT_REQUIRED_MESSAGE: Final[str] = "Le commentaire ne peut pas être vide."
COMMENT_TOO_SHORT_MESSAGE: Final[str] = (
    f"Le commentaire doit contenir au moins {MIN_COMMENT_LENGTH} caractères."
)


def normalize_comment_content(content: str | None) -> str:
    """
    Return the comment text with surrounding whitespace removed.

    Args:
        content (str | None): Raw text typed by the user.

    Returns:
        str: Stripped text ("" for None).
    """
    if content is None:
        return ""
    return content.strip()


def validate_comment_content(
    content: str | None,
    *,
    min_length: int = MIN_COMMENT_LENGTH,
) -> str:
    """
    Enforce comment content business rules:
    - required (not empty once stripped)
    - at least `min_length` characters once stripped

    Args:
        content (str | None): Comment text to validate.
        min_length (int): Minimum allowed length.

    Returns:
        str: The normalized (stripped) content.

    Raises:
        ValueError: If the content violates a rule.
    """
    text = normalize_comment_content(content)

    if not text:
        raise ValueError(COMMENT_REQUIRED_MESSAGE)

    if len(text) < min_length:
        raise ValueError(COMMENT_TOO_SHORT_MESSAGE)

    return text
