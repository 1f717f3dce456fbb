"""
Voter-based authorization primitives.

A voter answers one question for one kind of subject: may this actor
perform this attribute (action name) on this subject? Each voter returns a
three-valued ``Vote`` so "this rule does not apply" (ABSTAIN) is never
confused with "this rule refuses" (DENY).

Keep this module framework-agnostic (no DRF imports): DRF permission classes
in ``common.permissions`` adapt it to requests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class Vote(Enum):
    """Outcome of a single voter."""

    PERMIT = 1
    ABSTAIN = 0
    DENY = -1


def is_authenticated_actor(actor: Any) -> bool:
    """Return True if the actor is a real, authenticated user with an id."""
    if actor is None:
        return False
    if not getattr(actor, "is_authenticated", False):
        return False
    return getattr(actor, "id", None) is not None


class Voter:
    """
    Base class for voters.

    Subclasses implement:
    - supports(attribute, subject): does this voter handle the pair?
    - vote_on_attribute(attribute, subject, actor): the actual decision,
      only called for supported pairs.
    """

    def supports(self, attribute: str, subject: Any) -> bool:
        raise NotImplementedError

    def vote_on_attribute(self, attribute: str, subject: Any, actor: Any) -> bool:
        raise NotImplementedError

    def vote(self, actor: Any, attribute: str, subject: Any) -> Vote:
        """
        Return PERMIT/DENY for supported pairs, ABSTAIN otherwise.

        Args:
            actor: The current user (may be None or anonymous).
            attribute (str): Action name, e.g. "EDIT_COMMENT".
            subject: The object the action targets.

        Returns:
            Vote: The voter's decision.
        """
        if not self.supports(attribute, subject):
            return Vote.ABSTAIN

        if self.vote_on_attribute(attribute, subject, actor):
            return Vote.PERMIT
        return Vote.DENY


def is_granted(
    actor: Any,
    attribute: str,
    subject: Any,
    voters: Iterable[Voter],
    *,
    allow_if_all_abstain: bool = False,
) -> bool:
    """
    Affirmative access decision over a set of voters.

    - any PERMIT grants access
    - otherwise any DENY refuses access
    - all ABSTAIN falls back to `allow_if_all_abstain` (deny by default)
    """
    denied = False
    for voter in voters:
        result = voter.vote(actor, attribute, subject)
        if result is Vote.PERMIT:
            return True
        if result is Vote.DENY:
            denied = True

    if denied:
        logger.debug(
            "Access denied: attribute=%s subject=%r actor_id=%s",
            attribute,
            subject,
            getattr(actor, "id", None),
        )
        return False

    return allow_if_all_abstain
