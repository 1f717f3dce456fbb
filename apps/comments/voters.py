"""
Authorization rule for editing comments.

The rule only speaks for the ("EDIT_COMMENT", Comment) pair and abstains
for everything else, leaving the decision to the caller's default.
"""

from __future__ import annotations

from typing import Any, Final

from common.security import Vote, Voter, is_authenticated_actor

from .models import Comment

EDIT_COMMENT: Final[str] = "EDIT_COMMENT"


class CommentVoter(Voter):
    """
    Permit EDIT_COMMENT only to the comment's author.

    Reads nothing but the actor id and the comment's author_id, so it never
    hits the database and never raises.
    """

    def supports(self, attribute: str, subject: Any) -> bool:
        return attribute == EDIT_COMMENT and isinstance(subject, Comment)

    def vote_on_attribute(self, attribute: str, subject: Any, actor: Any) -> bool:
        if not is_authenticated_actor(actor):
            return False
        return subject.author_id == actor.id


comment_voter = CommentVoter()


def can_edit(actor: Any, action: str, subject: Any) -> Vote:
    """Return the EDIT_COMMENT vote for (actor, action, subject)."""
    return comment_voter.vote(actor, action, subject)
