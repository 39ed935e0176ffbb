"""Inbound webhook delivery handling."""

import json
import logging
from collections.abc import Mapping
from datetime import UTC, datetime

from proposify_client.webhooks.models import (
    RELATED_OBJECTS,
    SIGNATURE_HEADER,
    InboundWebhookEvent,
    WebhookResponse,
)
from proposify_client.webhooks.signature import verify_signature

logger = logging.getLogger(__name__)


def _present(value: object) -> bool:
    # empty objects and arrays still count as sent
    return isinstance(value, (dict, list)) or bool(value)


def _utc_timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def handle_delivery(
    raw_body: bytes,
    headers: Mapping[str, str],
    *,
    event: str,
    secret: str | None = None,
    require_signature: bool = False,
) -> WebhookResponse:
    """Verify one delivery and turn it into an event record.

    When a secret is configured, a delivery carrying a signature header that
    does not match is rejected with 401. A delivery with no header at all is
    accepted unless ``require_signature`` is set.

    Args:
        raw_body: Request body bytes as received (the signature covers these)
        headers: Request headers, any casing
        event: The event this trigger subscribed to, used when the body has none
        secret: Signing secret, if one was registered
        require_signature: Reject unsigned deliveries when a secret is set

    Returns:
        WebhookResponse with the event on 200, or an error body on 400/401
    """
    lowered = {key.lower(): value for key, value in headers.items()}
    signature = lowered.get(SIGNATURE_HEADER.lower())

    if secret:
        if signature:
            if not verify_signature(raw_body, signature, secret):
                logger.warning("Rejected Proposify webhook delivery: invalid signature")
                return WebhookResponse(status=401, body={"error": "Invalid signature"})
        elif require_signature:
            logger.warning("Rejected Proposify webhook delivery: missing signature")
            return WebhookResponse(status=401, body={"error": "Missing signature"})

    try:
        payload = json.loads(raw_body or b"{}")
    except (ValueError, UnicodeDecodeError):
        return WebhookResponse(status=400, body={"error": "Invalid JSON payload"})
    if not isinstance(payload, dict):
        return WebhookResponse(status=400, body={"error": "Invalid JSON payload"})

    record = InboundWebhookEvent(
        event=payload["event"] if _present(payload.get("event")) else str(event),
        timestamp=payload["timestamp"] if _present(payload.get("timestamp")) else _utc_timestamp(),
        data=payload["data"] if _present(payload.get("data")) else payload,
        related={name: payload[name] for name in RELATED_OBJECTS if _present(payload.get(name))},
    )
    logger.debug(f"Accepted Proposify webhook delivery for {record.event}")
    return WebhookResponse(status=200, body={"received": True}, event=record)
