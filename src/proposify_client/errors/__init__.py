"""Error handling for the Proposify client."""

from proposify_client.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ResponseDecodeError,
    ServerError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from proposify_client.errors.handler import exception_class_for, raise_for_status
from proposify_client.errors.models import ErrorDetail

__all__ = [
    "APIError",
    "BadRequestError",
    "ClientError",
    "ConflictError",
    "ErrorDetail",
    "ForbiddenError",
    "NotFoundError",
    "RateLimitError",
    "ResponseDecodeError",
    "ServerError",
    "TransportError",
    "UnauthorizedError",
    "ValidationError",
    "exception_class_for",
    "raise_for_status",
]
