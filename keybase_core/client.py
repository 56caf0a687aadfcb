"""
Keybase client facade.

This is the main entry point for users of the library. It provides a clean,
high-level API that hides the transport and services underneath.
"""

from collections.abc import Iterable, Sequence
from typing import Self

import httpx
import structlog

from keybase_core.api.http_client import HttpClient
from keybase_core.config import KeybaseConfig
from keybase_core.models.key import KeyOperation, KeyRecord
from keybase_core.models.user import User
from keybase_core.services.auth_service import AuthSession

logger = structlog.get_logger(__name__)


class KeybaseClient:
    """
    Client for the Keybase directory.

    Example:
        ```python
        with KeybaseClient() as client:
            me = client.login("chris", "passphrase")
            kid = me.add_public_key(armored_public_key)
            token = me.post_auth(signed_certificate)
            me.logout()

            them = client.lookup("max")
            keys = client.fetch_keys(["6052b2ad31a6631c"], ["encrypt", "verify"])
        ```

    Each client owns one session. Use one client per logged-in user.

    Args:
        config: Client configuration. Uses defaults if not provided.
        transport: Optional httpx transport for testing (mock transport).
    """

    def __init__(
        self,
        config: KeybaseConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config or KeybaseConfig()
        self._http = HttpClient(self._config, transport=transport)
        self._session = AuthSession(self._http, self._config)
        self._keys = self._session.keys

    def __enter__(self) -> Self:
        """Enter context."""
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object) -> None:
        """Exit context."""
        self.close()

    def close(self) -> None:
        """Close the client and release resources. Does not log out remotely."""
        self._http.close()
        logger.debug("Client closed")

    @property
    def session(self) -> AuthSession:
        """The session owned by this client."""
        return self._session

    @property
    def is_authenticated(self) -> bool:
        """Check if authenticated."""
        return self._session.is_authenticated

    def login(self, email_or_username: str, passphrase: str) -> User:
        """
        Log in to Keybase.

        Args:
            email_or_username: The email or username of the account.
            passphrase: The passphrase for the account.

        Returns:
            The user, bound to this client's session.

        Raises:
            InputError: If the submitted parameters are empty.
            NotFoundError: If the user is not found.
            BadCredentialError: If the passphrase is incorrect.
        """
        return self._session.login(email_or_username, passphrase)

    def logout(self) -> bool:
        """Log out, killing all of the user's sessions."""
        return self._session.logout()

    def lookup(self, username: str) -> User:
        """
        Look up a user on Keybase.

        Raises:
            InputError: If the username is empty or invalid.
            NotFoundError: If the user is not found.
        """
        return self._session.lookup(username)

    def fetch_keys(
        self,
        key_ids: Sequence[str],
        operations: Iterable[KeyOperation | str],
    ) -> list[KeyRecord]:
        """
        Fetch keys by PGP key id for a set of operations.

        Raises:
            InputError: If key_ids or operations are empty or invalid.
        """
        return self._keys.fetch_keys(key_ids, operations)
