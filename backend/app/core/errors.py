"""
User-facing GraphQL errors.

Every error carries a machine-readable ``extensions.code``. Messages are
already localized (Arabic) and rendered verbatim by the client.
"""

from typing import Any, Optional

from graphql import GraphQLError


class AppError(GraphQLError):
    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, extensions: Optional[dict[str, Any]] = None):
        super().__init__(message, extensions={"code": self.code, **(extensions or {})})


class BadUserInput(AppError):
    code = "BAD_USER_INPUT"


class ValidationFailed(BadUserInput):
    """Raised once per input with every violated rule."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("، ".join(self.errors), extensions={"errors": self.errors})


class Unauthenticated(AppError):
    code = "UNAUTHENTICATED"


class Forbidden(AppError):
    code = "FORBIDDEN"


class NotFound(AppError):
    code = "NOT_FOUND"
