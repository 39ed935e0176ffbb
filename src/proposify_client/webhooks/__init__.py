"""Proposify webhook trigger support.

- ``WebhookManager``: registration lifecycle (check-exists / create / delete)
- ``handle_delivery``: signature check and event extraction for inbound calls
- ``compute_signature`` / ``verify_signature``: HMAC-SHA256 helpers
"""

from proposify_client.webhooks.delivery import handle_delivery
from proposify_client.webhooks.lifecycle import WebhookManager
from proposify_client.webhooks.models import (
    SIGNATURE_HEADER,
    InboundWebhookEvent,
    WebhookEvent,
    WebhookRegistration,
    WebhookResponse,
    WebhookState,
)
from proposify_client.webhooks.signature import compute_signature, verify_signature

__all__ = [
    "SIGNATURE_HEADER",
    "InboundWebhookEvent",
    "WebhookEvent",
    "WebhookManager",
    "WebhookRegistration",
    "WebhookResponse",
    "WebhookState",
    "compute_signature",
    "handle_delivery",
    "verify_signature",
]
