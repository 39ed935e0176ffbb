"""Authentication for the Proposify client.

Example:
    ```python
    from proposify_client.auth import EnvCredentialProvider

    provider = EnvCredentialProvider()
    api_key = provider().api_key
    ```
"""

from proposify_client.auth.bearer import BearerAuth
from proposify_client.auth.credentials import (
    Credential,
    CredentialProvider,
    EnvCredentialProvider,
    static_credential,
)
from proposify_client.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)

__all__ = [
    "BearerAuth",
    "Credential",
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialProvider",
    "EnvCredentialProvider",
    "static_credential",
]
