from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppException(Exception):
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class NetworkError(AppException):
    """The request never produced an HTTP response."""

    def __init__(self, message: str = "Failed to connect to server"):
        super().__init__(message, status_code=503)


class ApiError(AppException):
    """The server answered, but not with a success."""

    def __init__(self, message: str, status_code: int, payload: Any = None):
        super().__init__(message, status_code=status_code)
        self.payload = payload


class NotAuthenticated(AppException):
    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message, status_code=401)


class ValidationFailed(AppException):
    def __init__(self, message: str):
        super().__init__(message, status_code=422)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def _app_exception_handler(_: Request, exc: AppException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message},
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(_: Request, exc: Exception):
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "message": str(exc)},
        )
