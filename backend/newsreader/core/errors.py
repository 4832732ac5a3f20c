# newsreader/core/errors.py
"""
Application error taxonomy.
Services raise these; routers and the exception handlers registered in
newsreader.main translate them into template re-renders, redirects or JSON.
"""


class AppError(Exception):
    """Base class for expected, user-facing failures."""

    status_code = 500
    code = "INTERNAL_ERROR"
    message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = 400
    code = "VALIDATION_ERROR"
    message = "Invalid input."


class InvalidCredentialsError(AppError):
    # Same message for unknown username and wrong password
    status_code = 401
    code = "AUTH_INVALID_CREDENTIALS"
    message = "Invalid username or password."


class UnauthenticatedError(AppError):
    """No authenticated session; answered with a 401 JSON body."""

    status_code = 401
    code = "AUTH_REQUIRED"
    message = "You must be logged in."


class LoginRequired(UnauthenticatedError):
    """No authenticated session on a page route; answered with a redirect to /login."""


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN"
    message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"
    message = "Not found."


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"
    message = "Already exists."


class DuplicateUsernameError(ConflictError):
    code = "USERNAME_EXISTS"
    message = "An account with that username already exists."
