"""
Tests for framework-agnostic helpers (validators, voter primitives).

No database: voters are exercised with plain stand-in objects.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from common.security import Vote, Voter, is_authenticated_actor, is_granted
from common.validators import (
    COMMENT_REQUIRED_MESSAGE,
    COMMENT_TOO_SHORT_MESSAGE,
    validate_comment_content,
)


@pytest.mark.parametrize("content", [None, "", "    "])
def test_validate_comment_content_requires_text(content) -> None:
    with pytest.raises(ValueError, match=COMMENT_REQUIRED_MESSAGE):
        validate_comment_content(content)


def test_validate_comment_content_min_length_counts_stripped_text() -> None:
    with pytest.raises(ValueError, match=COMMENT_TOO_SHORT_MESSAGE):
        validate_comment_content("  abcd  ")

    assert validate_comment_content("  abcde  ") == "abcde"


class FixedVoter(Voter):
    """Votes a fixed answer for one attribute."""

    def __init__(self, attribute: str, answer: bool) -> None:
        self.attribute = attribute
        self.answer = answer

    def supports(self, attribute, subject) -> bool:
        return attribute == self.attribute

    def vote_on_attribute(self, attribute, subject, actor) -> bool:
        return self.answer


USER = SimpleNamespace(id=1, is_authenticated=True)


def test_voter_abstains_on_unsupported_attribute() -> None:
    assert FixedVoter("READ", True).vote(USER, "WRITE", object()) is Vote.ABSTAIN
    assert FixedVoter("READ", True).vote(USER, "READ", object()) is Vote.PERMIT
    assert FixedVoter("READ", False).vote(USER, "READ", object()) is Vote.DENY


def test_is_granted_is_affirmative() -> None:
    voters = (FixedVoter("READ", False), FixedVoter("READ", True))
    assert is_granted(USER, "READ", None, voters) is True
    assert is_granted(USER, "READ", None, voters[:1]) is False


def test_is_granted_defaults_to_deny_when_everyone_abstains() -> None:
    voters = (FixedVoter("READ", True),)
    assert is_granted(USER, "WRITE", None, voters) is False
    assert is_granted(USER, "WRITE", None, voters, allow_if_all_abstain=True) is True
    assert is_granted(USER, "WRITE", None, ()) is False


@pytest.mark.parametrize(
    ("actor", "expected"),
    [
        (USER, True),
        (None, False),
        (SimpleNamespace(id=None, is_authenticated=False), False),
        (SimpleNamespace(id=None, is_authenticated=True), False),
        (object(), False),
    ],
)
def test_is_authenticated_actor(actor, expected) -> None:
    assert is_authenticated_actor(actor) is expected
