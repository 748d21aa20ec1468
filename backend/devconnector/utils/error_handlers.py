"""
Centralized error handling and user-friendly error messages.
"""
import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error."""
    def __init__(self, message: str, status_code: int = 500, details: dict | None = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """Validation error carrying a list of field-level messages."""
    def __init__(self, errors: list[dict], message: str | None = None):
        super().__init__(message or get_error_message("validation_error"), status_code=400)
        self.errors = errors


class NotFoundError(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Resource not found", details: dict | None = None):
        super().__init__(message, status_code=404, details=details)


class ProfileNotFoundError(NotFoundError):
    def __init__(self, message: str | None = None):
        super().__init__(message or get_error_message("profile_not_found"))


class UnauthorizedError(AppError):
    """Unauthorized access error."""
    def __init__(self, message: str = "Unauthorized access", details: dict | None = None):
        super().__init__(message, status_code=401, details=details)


class InvalidCredentialsError(UnauthorizedError):
    """Same message whether the email is unknown or the password is wrong."""
    def __init__(self):
        super().__init__(get_error_message("invalid_credentials"))


class ForbiddenError(AppError):
    """Forbidden access error."""
    def __init__(self, message: str = "Access forbidden", details: dict | None = None):
        super().__init__(message, status_code=403, details=details)


class ConflictError(AppError):
    """Duplicate resource error."""
    def __init__(self, message: str = "Resource already exists", details: dict | None = None):
        super().__init__(message, status_code=409, details=details)


class AlreadyLikedError(AppError):
    def __init__(self):
        super().__init__(get_error_message("already_liked"), status_code=400)


class NotLikedError(AppError):
    def __init__(self):
        super().__init__(get_error_message("not_liked"), status_code=400)


class UpstreamUnavailableError(AppError):
    """External API unreachable."""
    def __init__(self, message: str = "Upstream service temporarily unavailable", details: dict | None = None):
        super().__init__(message, status_code=503, details=details)


# User-friendly error messages
ERROR_MESSAGES = {
    # Authentication
    "invalid_credentials": "Invalid credentials",
    "email_exists": "User already exists",
    "weak_password": "Please enter a password with 6 or more characters",
    "password_too_long": "Password is too long (max 72 bytes)",
    "no_token": "No token, authorization denied",
    "invalid_token": "Token is not valid",

    # Profiles
    "profile_not_found": "There is no profile for this user",
    "user_not_found": "User not found",
    "github_not_found": "No Github profile found",
    "github_unavailable": "Not able to connect to Github",

    # Posts
    "post_not_found": "Post not found",
    "comment_not_found": "Comment does not exist",
    "already_liked": "Post already liked",
    "not_liked": "Post has not yet been liked",
    "not_post_owner": "User not authorized",
    "not_comment_owner": "User not authorized to delete this comment",

    # General
    "server_error": "Something went wrong on our end. Please try again later.",
    "database_error": "Database connection issue. Please try again later.",
    "validation_error": "Please check your input and try again.",
}


def get_error_message(error_key: str, default: str | None = None) -> str:
    """Get a user-friendly error message."""
    return ERROR_MESSAGES.get(error_key, default or ERROR_MESSAGES["server_error"])


def create_error_response(
    status_code: int,
    message: str,
    details: dict | None = None,
    errors: list[dict] | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    content: dict[str, Any] = {
        "success": False,
        "error": message,
    }

    if errors:
        content["errors"] = errors

    if details:
        content["details"] = details

    return JSONResponse(
        status_code=status_code,
        content=content
    )


def _request_validation_errors(exc: RequestValidationError) -> list[dict]:
    errors = []
    for err in exc.errors():
        # loc looks like ("body", "email") or ("path", "post_id")
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "header")]
        errors.append({"param": ".".join(loc) or "body", "msg": err.get("msg", "Invalid value")})
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return create_error_response(
            exc.status_code,
            exc.message,
            details=exc.details,
            errors=getattr(exc, "errors", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        """Report malformed bodies/params the same way as field validation."""
        return create_error_response(
            400,
            get_error_message("validation_error"),
            errors=_request_validation_errors(exc),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return create_error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(OperationalError)
    async def sqlalchemy_operational_error_handler(request: Request, exc: OperationalError):
        """Handle database operational errors."""
        logger.exception("Database OperationalError: %s", exc)
        return create_error_response(503, get_error_message("database_error"))

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
        """Handle general database errors."""
        logger.exception("Database SQLAlchemyError: %s", exc)
        return create_error_response(500, get_error_message("database_error"))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors globally."""
        logger.exception("Unhandled exception: %s", exc)
        return create_error_response(500, get_error_message("server_error"))
