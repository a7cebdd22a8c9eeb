"""Error taxonomy shared by the auth service, the access guard and the book handlers.

Every error carries an HTTP status, a stable machine-readable ``code`` and a
short client-facing ``message``. The API layer maps them to responses in one
place (see ``bookcircle.main``); nothing below it builds HTTP responses.
"""


class AuthServiceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "Internal server error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InputValidationError(AuthServiceError):
    """A required field is missing or malformed (checked before any store access)."""

    status_code = 422
    code = "validation_error"
    default_message = "Invalid input."


class ConflictError(AuthServiceError):
    """Username or email is already registered."""

    status_code = 400
    code = "conflict"
    default_message = "An account with this username or email already exists."


class InvalidCredentialsError(AuthServiceError):
    """Unknown identifier or wrong password. The two cases share one message."""

    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid identifier or password."


class UnauthorizedError(AuthServiceError):
    """No usable bearer credential was presented."""

    status_code = 401
    code = "unauthorized"
    default_message = "Not authenticated."


class InvalidTokenError(UnauthorizedError):
    """Bad signature, malformed token, wrong secret, wrong kind or revoked."""

    code = "invalid_token"
    default_message = "Invalid token."


class ExpiredTokenError(UnauthorizedError):
    """Signature is fine but the token is past its expiry; clients should refresh."""

    code = "token_expired"
    default_message = "Token expired."


class InvalidRefreshTokenError(InvalidTokenError):
    """Refresh token failed verification or was revoked."""

    status_code = 403
    code = "invalid_refresh_token"
    default_message = "Invalid refresh token."


class ForbiddenError(AuthServiceError):
    """Authenticated, but the role is not allowed to perform the operation."""

    status_code = 403
    code = "forbidden"
    default_message = "Insufficient permissions."


class NotFoundError(AuthServiceError):
    status_code = 404
    code = "not_found"
    default_message = "Not found."


class InternalError(AuthServiceError):
    """Store or hasher failure. The original exception is chained, never returned."""
