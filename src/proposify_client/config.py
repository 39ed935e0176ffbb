"""Client configuration from the environment.

Variables (``.env`` files are honored through python-dotenv):

- ``PROPOSIFY_BASE_URL``: API root, default ``https://api.proposify.com/v1``
- ``PROPOSIFY_WEBHOOK_SECRET``: signing secret for the webhook trigger
- ``PROPOSIFY_RATELIMIT_WARN_BELOW``: remaining-quota warning threshold

The API key itself is not part of the settings; see
``proposify_client.auth.EnvCredentialProvider``.
"""

import os
from dataclasses import dataclass, field

import dotenv

from proposify_client.client import BASE_URL


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class ProposifySettings:
    base_url: str = BASE_URL
    webhook_secret: str | None = field(default=None, repr=False)
    rate_limit_warn_below: int = 10

    @classmethod
    def from_env(cls, *, dotenv_path: str | None = None, load_dotenv: bool = True) -> "ProposifySettings":
        """Read settings from the environment.

        Raises:
            ValueError: If ``PROPOSIFY_RATELIMIT_WARN_BELOW`` is not an integer
        """
        if load_dotenv:
            dotenv.load_dotenv(dotenv_path=dotenv_path)

        return cls(
            base_url=os.environ.get("PROPOSIFY_BASE_URL") or BASE_URL,
            webhook_secret=os.environ.get("PROPOSIFY_WEBHOOK_SECRET") or None,
            rate_limit_warn_below=_int_env("PROPOSIFY_RATELIMIT_WARN_BELOW", 10),
        )
