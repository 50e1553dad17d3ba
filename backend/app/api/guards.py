"""
Authorization guard for protected GraphQL fields.

Declared per field with ``permission_classes=[IsAuthenticated]``. Strawberry
runs the permission list in order before the resolver and stops at the
first failure, so an anonymous request never reaches business logic.
"""

from typing import Any

from strawberry.permission import BasePermission
from strawberry.types import Info

from app.core.errors import Unauthenticated
from app.core.security import AuthenticatedUser


class IsAuthenticated(BasePermission):
    message = "Authentication required!"
    error_class = Unauthenticated
    error_extensions = {"code": Unauthenticated.code}

    def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
        return info.context.get("user") is not None


def current_user(info: Info) -> AuthenticatedUser:
    """The caller of a field guarded by IsAuthenticated."""
    user = info.context.get("user")
    if user is None:
        raise Unauthenticated(IsAuthenticated.message)
    return user
