from dataclasses import dataclass
from enum import Enum
from typing import Any

from iotlock.core.exceptions import (
    AppException,
    NetworkError,
    NotAuthenticated,
    ValidationFailed,
)


class ErrorKind(str, Enum):
    network = "network"
    http = "http"
    not_authenticated = "not_authenticated"
    validation = "validation"
    busy = "busy"


@dataclass(frozen=True)
class Outcome:
    """Result handed back to the presentation layer.

    Truthy exactly when the operation succeeded, so callers that only care
    about success can write ``if await auth.login(...)``.
    """

    ok: bool
    message: str | None = None
    kind: ErrorKind | None = None
    data: Any = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, data: Any = None, message: str | None = None) -> "Outcome":
        return cls(ok=True, message=message, data=data)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "Outcome":
        return cls(ok=False, message=message, kind=kind)

    @classmethod
    def from_exception(cls, exc: AppException) -> "Outcome":
        return cls.failure(_kind_for(exc), exc.message)


def _kind_for(exc: AppException) -> ErrorKind:
    if isinstance(exc, NetworkError):
        return ErrorKind.network
    if isinstance(exc, NotAuthenticated):
        return ErrorKind.not_authenticated
    if isinstance(exc, ValidationFailed):
        return ErrorKind.validation
    return ErrorKind.http


BUSY = Outcome.failure(ErrorKind.busy, "Request already in progress")
