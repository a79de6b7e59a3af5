"""Domain errors raised by services and turned into JSON responses at the request boundary."""


class TrackerError(Exception):
    """Base for all errors that map to an HTTP status and a stable error code."""

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(TrackerError):
    """Missing or malformed required fields."""

    status_code = 400
    code = "invalid_input"
    default_message = "Invalid input."


class InvalidCredentialsError(TrackerError):
    """Unknown username or wrong password; the message never says which."""

    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid username or password."


class UnauthorizedError(TrackerError):
    """Missing, malformed or unknown bearer token."""

    status_code = 401
    code = "unauthorized"
    default_message = "Not authenticated"


class SessionExpiredError(UnauthorizedError):
    """Bearer token was issued but is past its expiry."""

    code = "session_expired"
    default_message = "Session expired"


class ForbiddenError(TrackerError):
    """Authenticated, but the session role is not permitted."""

    status_code = 403
    code = "forbidden"
    default_message = "Insufficient role for this operation"


class NotFoundError(TrackerError):
    status_code = 404
    code = "not_found"
    default_message = "Not found."


class ConflictError(TrackerError):
    status_code = 409
    code = "conflict"
    default_message = "Already exists."


class TooManyAttemptsError(TrackerError):
    """Username is temporarily locked after repeated failed logins."""

    status_code = 429
    code = "too_many_attempts"
    default_message = "Too many failed attempts. Try again later."

    def __init__(self, message: str | None = None, retry_after: int | None = None) -> None:
        self.retry_after = retry_after
        super().__init__(message)


class StoreFailureError(TrackerError):
    """Underlying persistence failed; the cause is kept for logging only."""

    status_code = 500
    code = "store_failure"
    default_message = "Storage operation failed."

    def __init__(self, message: str | None = None, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)
