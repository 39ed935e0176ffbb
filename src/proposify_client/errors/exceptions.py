"""Structured exceptions for Proposify API failures.

Every failure raised by the request client is an ``APIError``. Callers that
only care about "the call failed" catch the base class; the subclasses keep
the 4xx/5xx distinction available for logging and error records.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from proposify_client.errors.models import ErrorDetail


class APIError(Exception):
    """Base exception for Proposify API errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
        detail: "ErrorDetail | None" = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response
        self.detail = detail

    def to_dict(self) -> dict:
        """Error payload suitable for an error-annotated output record."""
        payload: dict = {"error": self.message}
        if self.status_code is not None:
            payload["status_code"] = self.status_code
        return payload


class ClientError(APIError):
    """4xx client errors."""

    pass


class BadRequestError(ClientError):
    """400 Bad Request."""

    pass


class UnauthorizedError(ClientError):
    """401 Unauthorized (missing or revoked API key)."""

    pass


class ForbiddenError(ClientError):
    """403 Forbidden."""

    pass


class NotFoundError(ClientError):
    """404 Not Found."""

    pass


class ConflictError(ClientError):
    """409 Conflict."""

    pass


class ValidationError(ClientError):
    """422 Unprocessable Entity."""

    def __init__(self, message: str, validation_errors: list | dict | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.validation_errors = validation_errors if validation_errors is not None else []


class RateLimitError(ClientError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(APIError):
    """5xx server errors."""

    pass


class TransportError(APIError):
    """The request never produced a response (DNS, connect, timeout, ...)."""

    def __init__(self, message: str, cause: Exception | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.cause = cause


class ResponseDecodeError(APIError):
    """A 2xx response whose body is not valid JSON."""

    pass
