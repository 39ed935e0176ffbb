"""Webhook registration lifecycle: check-exists, create, delete.

The host drives the three transitions (Absent -> Registered -> Absent) when a
workflow is activated or deactivated, always one call at a time per workflow.
The registration id lives in a ``WebhookState`` the host persists between
calls.

Example:
    ```python
    state = WebhookState.from_dict(stored)
    manager = WebhookManager(
        client,
        state,
        webhook_url="https://hooks.example.com/wf/42",
        event=WebhookEvent.PROPOSAL_WON,
        secret="s3cret",
    )
    if not await manager.check_exists():
        await manager.create()
    stored = state.to_dict()
    ```
"""

import logging
from typing import Any

from proposify_client.auth.exceptions import CredentialError
from proposify_client.errors.exceptions import APIError
from proposify_client.pagination import SupportsRequest
from proposify_client.webhooks.models import WebhookRegistration, WebhookState

logger = logging.getLogger(__name__)

WEBHOOKS_PATH = "/webhooks"


class WebhookManager:
    """Register and deregister this workflow's Proposify webhook.

    Args:
        client: Request client used for the registration calls
        state: Per-workflow state holding the registration id
        webhook_url: Callback URL the host assigned to this workflow
        event: Event to subscribe to
        secret: Optional signing secret handed to the provider
    """

    def __init__(
        self,
        client: SupportsRequest,
        state: WebhookState,
        *,
        webhook_url: str,
        event: str,
        secret: str | None = None,
    ) -> None:
        self.client = client
        self.state = state
        self.webhook_url = webhook_url
        self.event = str(event)
        self.secret = secret or None

    async def check_exists(self) -> bool:
        """Look for a registration with this workflow's url and event.

        Listing failures are logged and reported as "not found".
        """
        try:
            response = await self.client.request("GET", WEBHOOKS_PATH)
        except (APIError, CredentialError) as e:
            logger.warning(f"Could not list Proposify webhooks, assuming none registered: {e}")
            return False

        for registration in _registrations(response):
            if registration.matches(self.webhook_url, self.event):
                self.state.webhook_id = registration.id
                logger.debug(f"Found existing webhook {registration.id} for {self.event}")
                return True

        return False

    async def create(self) -> bool:
        """Register the webhook with the provider.

        Returns:
            True if the provider returned an id (now cached in state),
            False if it answered without one

        Raises:
            APIError: Registration failed. The state is left untouched.
        """
        body: dict[str, Any] = {
            "url": self.webhook_url,
            "event": self.event,
            "active": True,
        }
        if self.secret:
            body["secret"] = self.secret

        response = await self.client.request("POST", WEBHOOKS_PATH, body)

        data = response.get("data") if isinstance(response, dict) else None
        webhook_id = data.get("id") if isinstance(data, dict) else None
        if not webhook_id:
            logger.warning(f"Proposify accepted webhook for {self.event} but returned no id")
            return False

        self.state.webhook_id = str(webhook_id)
        logger.info(f"Registered Proposify webhook {webhook_id} for {self.event}")
        return True

    async def delete(self) -> bool:
        """Deregister the cached webhook, if any.

        Failures are logged and ignored; the cached id is always cleared so
        teardown never blocks.
        """
        webhook_id = self.state.webhook_id
        if not webhook_id:
            return True

        try:
            await self.client.request("DELETE", f"{WEBHOOKS_PATH}/{webhook_id}")
            logger.info(f"Deleted Proposify webhook {webhook_id}")
        except (APIError, CredentialError) as e:
            logger.warning(f"Could not delete Proposify webhook {webhook_id}, treating as removed: {e}")
        finally:
            self.state.webhook_id = None

        return True


def _registrations(response: Any) -> list[WebhookRegistration]:
    data = response.get("data") if isinstance(response, dict) else None
    if not isinstance(data, list):
        return []
    return [WebhookRegistration.from_dict(item) for item in data if isinstance(item, dict) and item.get("id")]
