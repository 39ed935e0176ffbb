"""API key accessors for the Proposify client.

The client never stores the API key. It holds a *credential provider*, a
zero-argument callable returning a ``Credential``, and calls it once per
request. The host decides where the key lives.

Resolution order for ``EnvCredentialProvider`` (first match wins):
1. ``PROPOSIFY_API_KEY`` environment variable
2. ``.env`` file (python-dotenv), loaded once into the environment
3. File named by ``PROPOSIFY_API_KEY_FILE`` (docker/k8s secrets)

Example:
    ```python
    from proposify_client.auth import EnvCredentialProvider, static_credential

    provider = EnvCredentialProvider()
    credential = provider()

    # Tests and scripts
    provider = static_credential("pk_live_123")
    ```

Security Considerations:
    - API keys are never logged (masked with ***)
    - ``Credential.__repr__`` masks the key
    - File-based keys have whitespace stripped
"""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock

import dotenv

from proposify_client.auth.exceptions import CredentialFileError, CredentialNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_ENV_VAR = "PROPOSIFY_API_KEY"
DEFAULT_FILE_ENV_VAR = "PROPOSIFY_API_KEY_FILE"


@dataclass(frozen=True)
class Credential:
    """A Proposify API key."""

    api_key: str = field(repr=False)

    def __repr__(self) -> str:
        return "Credential(api_key='***')"


CredentialProvider = Callable[[], Credential]


def static_credential(api_key: str) -> CredentialProvider:
    """Build a provider that always returns the same key.

    Raises:
        CredentialNotFoundError: If ``api_key`` is empty.
    """
    if not api_key:
        raise CredentialNotFoundError("API key must not be empty")
    credential = Credential(api_key=api_key)

    def provider() -> Credential:
        return credential

    return provider


class EnvCredentialProvider:
    """Resolve the API key from the environment on every call.

    Reading on every call means a rotated key is picked up without
    rebuilding the client.

    Attributes:
        env_var_name: Variable holding the key itself.
        file_env_var_name: Variable holding a path to a file with the key.
    """

    def __init__(
        self,
        *,
        env_var_name: str = DEFAULT_ENV_VAR,
        file_env_var_name: str | None = DEFAULT_FILE_ENV_VAR,
        dotenv_path: str | None = None,
        load_dotenv: bool = True,
    ):
        """Initialize the provider.

        Args:
            env_var_name: Environment variable holding the API key.
            file_env_var_name: Environment variable holding a path to a file
                containing the API key. None disables file lookup.
            dotenv_path: Path to .env file. If None, python-dotenv searches
                parent directories.
            load_dotenv: Whether to load the .env file at all.
        """
        self.env_var_name = env_var_name
        self.file_env_var_name = file_env_var_name
        self._dotenv_path = dotenv_path
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()

        if load_dotenv:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return
            try:
                dotenv.load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for credential resolution")
            except OSError as e:
                logger.warning(f"Failed to load .env file: {e}")
            self._dotenv_loaded = True

    def __call__(self) -> Credential:
        """Resolve the current API key.

        Raises:
            CredentialNotFoundError: If neither the variable nor the file is set.
            CredentialFileError: If the key file is configured but unreadable
                or empty.
        """
        value = os.environ.get(self.env_var_name)
        if value:
            logger.debug(f"Resolved API key from environment variable '{self.env_var_name}': ***")
            return Credential(api_key=value)

        if self.file_env_var_name:
            file_path = os.environ.get(self.file_env_var_name)
            if file_path:
                return Credential(api_key=self._read_key_file(file_path))

        error_msg = f"Proposify API key not found (checked env var: {self.env_var_name}"
        if self.file_env_var_name:
            error_msg += f", {self.file_env_var_name}"
        raise CredentialNotFoundError(error_msg + ")", env_var_name=self.env_var_name)

    def _read_key_file(self, file_path: str) -> str:
        path = Path(os.path.expanduser(os.path.expandvars(file_path)))

        try:
            content = path.read_text().strip()
        except FileNotFoundError:
            raise CredentialFileError(f"Credential file not found: {path}", file_path=str(path)) from None
        except PermissionError:
            raise CredentialFileError(
                f"Permission denied reading credential file: {path}", file_path=str(path)
            ) from None
        except OSError as e:
            raise CredentialFileError(f"Error reading credential file {path}: {e}", file_path=str(path)) from e

        if not content:
            raise CredentialFileError(f"Credential file is empty: {path}", file_path=str(path))

        logger.debug(f"Resolved API key from file: {path} (***)")
        return content
