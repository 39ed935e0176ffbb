"""Error body models for Proposify responses."""

from dataclasses import dataclass
from typing import Any

import httpx

# RFC 7807 members
PROBLEM_FIELDS = frozenset({"type", "title", "status", "detail", "instance"})

# Keys the provider uses for plain JSON error bodies
MESSAGE_FIELDS = ("message", "error", "error_description")


@dataclass
class ErrorDetail:
    """Parsed error body.

    Proposify answers most failures with ``{"message": ..., "errors": {...}}``,
    but RFC 7807 problem documents are accepted too.

    See: https://datatracker.ietf.org/doc/html/rfc7807
    """

    message: str | None = None
    title: str | None = None
    status: int | None = None
    type: str | None = None
    instance: str | None = None
    errors: list | dict | None = None

    # Anything else the API sent back
    extensions: dict[str, Any] | None = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ErrorDetail | None":
        """Parse an error body from an HTTP response.

        Args:
            response: HTTP response object

        Returns:
            ErrorDetail, or None if the body is not a recognizable JSON error
        """
        try:
            data = response.json()
        except (ValueError, TypeError, AttributeError):
            return None

        if not isinstance(data, dict):
            return None

        known = PROBLEM_FIELDS | set(MESSAGE_FIELDS) | {"errors"}
        if not any(field in data for field in known):
            return None

        message = None
        for field in MESSAGE_FIELDS:
            value = data.get(field)
            if isinstance(value, str) and value:
                message = value
                break
        if message is None and isinstance(data.get("detail"), str):
            message = data["detail"]

        status = data.get("status")
        extensions = {k: v for k, v in data.items() if k not in known}

        return cls(
            message=message,
            title=data.get("title"),
            status=status if isinstance(status, int) else None,
            type=data.get("type"),
            instance=data.get("instance"),
            errors=data.get("errors"),
            extensions=extensions if extensions else None,
        )

    def to_exception_message(self) -> str:
        """Render the error body as a single exception message."""
        lines = []

        if self.title:
            lines.append(self.title)
        if self.message and self.message != self.title:
            lines.append(self.message)

        if self.type:
            lines.append(f"Problem Type: {self.type}")
        if self.instance:
            lines.append(f"Instance: {self.instance}")

        if isinstance(self.errors, dict):
            for field, problems in self.errors.items():
                lines.append(f"  - {field}: {problems}")
        elif isinstance(self.errors, list):
            for problem in self.errors:
                lines.append(f"  - {problem}")

        return "\n".join(lines) if lines else "Unknown API error"
