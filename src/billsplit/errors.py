from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    PERMISSION_DENIED = "permission-denied"
    NOT_FOUND = "not-found"
    INVALID_ARGUMENT = "invalid-argument"
    NETWORK_ERROR = "network-error"
    PARSE_ERROR = "parse-error"


class InvalidInput(ValueError):
    """Raised before calculation when a bill snapshot is outside the engine's contract."""


class ServiceError(Exception):
    """Failure of a collaborator (store, share links, text model), tagged with its kind."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class AuthorizationError(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.PERMISSION_DENIED, message)
