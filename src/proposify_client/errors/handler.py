"""Map HTTP responses onto the APIError hierarchy."""

import httpx

from proposify_client.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)
from proposify_client.errors.models import ErrorDetail

STATUS_EXCEPTIONS: dict[int, type[APIError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: RateLimitError,
}


def exception_class_for(status_code: int) -> type[APIError]:
    """Pick the exception class for an HTTP status code."""
    if status_code in STATUS_EXCEPTIONS:
        return STATUS_EXCEPTIONS[status_code]
    if 400 <= status_code < 500:
        return ClientError
    if 500 <= status_code < 600:
        return ServerError
    return APIError


def _parse_retry_after(response: httpx.Response) -> int | None:
    value = response.headers.get("retry-after")
    if value is None:
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def raise_for_status(response: httpx.Response) -> None:
    """Raise the matching APIError subclass for a non-2xx response.

    The error body is parsed when it is JSON; otherwise the first 200
    characters of the response text are used as the message.

    Args:
        response: HTTP response object

    Raises:
        APIError subclass based on status code
    """
    if response.is_success:
        return

    status_code = response.status_code
    exc_class = exception_class_for(status_code)
    detail = ErrorDetail.from_response(response)

    if detail:
        message = f"HTTP {status_code}: {detail.to_exception_message()}"
    else:
        response_text = response.text[:200]
        message = f"HTTP {status_code}: {response_text}" if response_text else f"HTTP {status_code}"

    kwargs = {
        "status_code": status_code,
        "response": response,
        "detail": detail,
    }

    if exc_class is RateLimitError:
        raise RateLimitError(message, retry_after=_parse_retry_after(response), **kwargs)

    if exc_class is ValidationError:
        raise ValidationError(message, validation_errors=detail.errors if detail else None, **kwargs)

    raise exc_class(message, **kwargs)
