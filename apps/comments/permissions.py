from __future__ import annotations

from common.permissions import VoterPermission

from .voters import EDIT_COMMENT, comment_voter


class CanEditComment(VoterPermission):
    """Allow write access to a comment only when EDIT_COMMENT is granted."""

    message = "Seul l'auteur du commentaire peut le modifier ou le supprimer."

    attribute = EDIT_COMMENT
    voters = (comment_voter,)
