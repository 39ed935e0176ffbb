"""Parameter marshalling between workflow fields and Proposify requests.

Workflow parameters arrive camelCased (``dateFrom``, ``prospectId``); the API
expects snake_case. Unset values (``None`` or ``""``) are dropped so they
never reach a request body or query string.
"""

import re
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any, Literal

_UPPER = re.compile(r"[A-Z]")
_SNAKE_PART = re.compile(r"_([a-z])")


def _is_unset(value: Any) -> bool:
    return value is None or value == ""


def camel_to_snake(name: str) -> str:
    return _UPPER.sub(lambda m: f"_{m.group(0).lower()}", name)


def snake_to_camel(name: str) -> str:
    return _SNAKE_PART.sub(lambda m: m.group(1).upper(), name)


def format_date(value: str | datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix.

    Naive datetimes and strings without an offset are taken as UTC.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_filters(filters: Mapping[str, Any]) -> dict[str, Any]:
    """Turn list-operation filters into query parameters.

    - ``status`` given as a list is comma-joined
    - ``dateFrom`` / ``dateTo`` become ``date_from`` / ``date_to`` (ISO-8601)
    - every other key is converted to snake_case
    """
    query: dict[str, Any] = {}

    for key, value in filters.items():
        if _is_unset(value):
            continue
        if key == "status" and isinstance(value, (list, tuple)):
            query["status"] = ",".join(str(v) for v in value)
        elif key in ("dateFrom", "dateTo"):
            query["date_from" if key == "dateFrom" else "date_to"] = format_date(value)
        else:
            query[camel_to_snake(key)] = value

    return query


def process_additional_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Drop unset values and unwrap ``{"values": [...]}`` collections."""
    processed: dict[str, Any] = {}

    for key, value in fields.items():
        if _is_unset(value):
            continue
        if isinstance(value, Mapping) and isinstance(value.get("values"), list):
            processed[key] = value["values"]
        else:
            processed[key] = value

    return processed


def transform_keys(obj: Mapping[str, Any], to: Literal["snake", "camel"]) -> dict[str, Any]:
    """Recursively rename keys of nested dicts, including dicts inside lists."""
    convert = camel_to_snake if to == "snake" else snake_to_camel
    result: dict[str, Any] = {}

    for key, value in obj.items():
        if isinstance(value, Mapping):
            value = transform_keys(value, to)
        elif isinstance(value, list):
            value = [transform_keys(item, to) if isinstance(item, Mapping) else item for item in value]
        result[convert(key)] = value

    return result


def simplify_output(items: list[dict], fields: Iterable[str] | None = None) -> list[dict]:
    """Keep only ``fields`` of each record; no fields means no change."""
    fields = list(fields or [])
    if not fields:
        return items
    return [{field: item[field] for field in fields if field in item} for item in items]
