"""Error types raised during startup and by resolvers."""

from __future__ import annotations

from graphql import GraphQLError


class StartupError(RuntimeError):
    """The subgraph cannot start serving requests."""


class SchemaLoadError(StartupError):
    """The schema file is missing, unparsable or cannot be composed."""


class AuthenticationError(GraphQLError):
    def __init__(self, message: str = "You must be logged in") -> None:
        super().__init__(message, extensions={"code": "UNAUTHENTICATED"})


class ForbiddenError(GraphQLError):
    def __init__(self, message: str) -> None:
        super().__init__(message, extensions={"code": "FORBIDDEN"})


class BadUserInputError(GraphQLError):
    def __init__(self, message: str) -> None:
        super().__init__(message, extensions={"code": "BAD_USER_INPUT"})
