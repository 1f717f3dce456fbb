from __future__ import annotations

from typing import Any, ClassVar

from rest_framework.permissions import SAFE_METHODS, BasePermission

from common.security import Voter, is_granted

# ------------------------------------------------------------------
# Shared helpers / base classes
# ------------------------------------------------------------------


class AuthenticatedPermission(BasePermission):
    """
    Base permission that requires an authenticated user.

    Use this when you want the permission itself
    to enforce authentication, instead of relying on the view's
    permission_classes to include IsAuthenticated.
    """

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        return bool(user and getattr(user, "is_authenticated", False))

    @staticmethod
    def _user(request):
        """Return request.user safely (works with RequestFactory too)."""
        return getattr(request, "user", None)


class VoterPermission(AuthenticatedPermission):
    """
    Object permission delegating the decision to voters.

    Subclasses declare:
    - attribute: the action name voted on (e.g. "EDIT_COMMENT")
    - voters: the voter instances consulted

    Safe methods are not gated unless `guard_safe_methods` is True.
    When every voter abstains, access is refused.
    """

    attribute: ClassVar[str] = ""
    voters: ClassVar[tuple[Voter, ...]] = ()
    guard_safe_methods: ClassVar[bool] = False

    def has_object_permission(self, request, view, obj: Any) -> bool:
        if request.method in SAFE_METHODS and not self.guard_safe_methods:
            return True

        return is_granted(self._user(request), self.attribute, obj, self.voters)
