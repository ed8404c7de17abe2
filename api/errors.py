"""
Error taxonomy and the JSON error envelope.

Every error response has the shape ``{"message": ..., "error": CODE}``;
validation failures add an ``errors`` list.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    code = "SERVER_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message, "error": self.code}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class DuplicateIdentity(AppError):
    code = "USER_EXISTS"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User with this email or username already exists"


class InvalidCredentials(AppError):
    code = "INVALID_CREDENTIALS"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid credentials"


class AuthTokenMissing(AppError):
    code = "NO_TOKEN"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "No token provided, authorization denied"


class InvalidToken(AppError):
    code = "INVALID_TOKEN"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Token is not valid"


class TokenExpired(AppError):
    code = "TOKEN_EXPIRED"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Token has expired"


class UserNotFound(AppError):
    code = "USER_NOT_FOUND"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Token is valid but user not found"


class NotFound(AppError):
    code = "TASK_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Task not found"


class InvalidIdentifier(AppError):
    code = "INVALID_TASK_ID"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid task ID"


class ServerError(AppError):
    pass


def _validation_details(exc: RequestValidationError) -> List[Dict[str, Any]]:
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        details.append({"field": ".".join(loc), "msg": err.get("msg", "")})
    return details


def register_exception_handlers(app: FastAPI) -> None:
    """Map the taxonomy, request validation and unexpected failures to JSON."""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = ValidationError(errors=_validation_details(exc))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        error = ServerError()
        return JSONResponse(status_code=error.status_code, content=error.to_dict())
