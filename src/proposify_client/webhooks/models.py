"""Webhook data models."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

SIGNATURE_HEADER = "X-Proposify-Signature"

# Nested objects copied from a delivery into the emitted record
RELATED_OBJECTS = ("proposal", "prospect", "signature", "comment", "fee")


class WebhookEvent(StrEnum):
    """Events a Proposify webhook can subscribe to."""

    COMMENT_ADDED = "comment.added"
    FEE_ACCEPTED = "fee.accepted"
    FEE_DECLINED = "fee.declined"
    PROPOSAL_CREATED = "proposal.created"
    PROPOSAL_EXPIRED = "proposal.expired"
    PROPOSAL_LOST = "proposal.lost"
    PROPOSAL_SENT = "proposal.sent"
    PROPOSAL_VIEWED = "proposal.viewed"
    PROPOSAL_WON = "proposal.won"
    PROSPECT_CREATED = "prospect.created"
    SIGNATURE_COMPLETED = "signature.completed"
    SIGNATURE_DECLINED = "signature.declined"


@dataclass(frozen=True)
class WebhookRegistration:
    """A webhook subscription as the provider reports it."""

    id: str
    url: str
    event: str
    secret: str | None = field(default=None, repr=False)
    active: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WebhookRegistration":
        return cls(
            id=str(data["id"]),
            url=data.get("url", ""),
            event=data.get("event", ""),
            secret=data.get("secret"),
            active=bool(data.get("active", True)),
        )

    def matches(self, url: str, event: str) -> bool:
        return self.url == url and self.event == event


@dataclass
class WebhookState:
    """Per-workflow webhook state owned and persisted by the host.

    Only the registration id is kept. The host hands the same instance (or
    one rebuilt with ``from_dict``) to every lifecycle call of a workflow.
    """

    webhook_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"webhook_id": self.webhook_id} if self.webhook_id else {}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "WebhookState":
        webhook_id = (data or {}).get("webhook_id")
        return cls(webhook_id=str(webhook_id) if webhook_id else None)


@dataclass
class InboundWebhookEvent:
    """One accepted delivery, ready to hand to the workflow."""

    event: str
    timestamp: str
    data: Any
    related: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        record = {"event": self.event, "timestamp": self.timestamp, "data": self.data}
        record.update(self.related)
        return record


@dataclass
class WebhookResponse:
    """Outcome of handling a delivery.

    ``event`` is set only when the delivery was accepted; rejected deliveries
    carry an error ``body`` for the HTTP response instead.
    """

    status: int
    body: dict[str, Any] = field(default_factory=dict)
    event: InboundWebhookEvent | None = None

    @property
    def accepted(self) -> bool:
        return self.event is not None
