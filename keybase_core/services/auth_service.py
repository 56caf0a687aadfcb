"""
Authentication service for Keybase.

Handles the salted login handshake, logout and user lookup.
"""

import re
import threading
from enum import StrEnum

import structlog

from keybase_core.api.endpoints.auth import (
    get_salt_and_login_session,
    kill_all_sessions,
    login,
)
from keybase_core.api.endpoints.user import lookup_user
from keybase_core.api.http_client import HttpClient
from keybase_core.config import KeybaseConfig
from keybase_core.crypto.credential import derive_authenticator
from keybase_core.exceptions import InputError, KeybaseError, NormalizationError, SessionError
from keybase_core.models.normalizer import normalize_user
from keybase_core.models.user import User
from keybase_core.services.key_service import KeyRegistry
from keybase_core.services.sig_service import SignaturePoster

logger = structlog.get_logger(__name__)

_USERNAME_PATTERN = re.compile(r"[A-Za-z0-9_]{1,16}")


class SessionState(StrEnum):
    """Authentication state of an AuthSession."""

    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class AuthSession:
    """
    Handles Keybase authentication.

    Moves between ANONYMOUS and AUTHENTICATED through login() and logout().
    The session cookie and CSRF token live exclusively in HttpClient; this
    class only tracks the state and gates privileged operations on it.

    Concurrency:
    - One AuthSession belongs to one owner. login() and logout() are
      serialized by an internal lock, but a logout racing a privileged call
      may still leave that call with a dead session.
    - Independent AuthSession instances must use independent HttpClients.
    """

    def __init__(
        self,
        http_client: HttpClient,
        config: KeybaseConfig | None = None,
    ) -> None:
        """
        Args:
            http_client: HTTP client owning this session's credentials.
            config: Client configuration.
        """
        self._http = http_client
        self._config = config or KeybaseConfig()

        self._state = SessionState.ANONYMOUS
        self._login_id = 0
        self._lock = threading.Lock()

        self.keys = KeyRegistry(http_client)
        self.signatures = SignaturePoster(verify_tokens=self._config.verify_auth_tokens)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_authenticated(self) -> bool:
        """Check if authenticated."""
        return self._state is SessionState.AUTHENTICATED

    @property
    def login_id(self) -> int:
        """Identifies the current login. Changes with every successful login."""
        return self._login_id

    def require_authenticated(self, login_id: int | None = None) -> HttpClient:
        """
        Get the HTTP client bound to this session.

        Args:
            login_id: If given, the session must still be on that login.

        Raises:
            SessionError: If the session is anonymous, or has moved on to
                another login since login_id was issued.
        """
        if self._state is not SessionState.AUTHENTICATED:
            msg = "Not authenticated. Call login() first."
            raise SessionError(msg)
        if login_id is not None and login_id != self._login_id:
            msg = "Session has ended. Call login() again."
            raise SessionError(msg, login_id=login_id)
        return self._http

    def login(self, email_or_username: str, passphrase: str) -> User:
        """
        Log in to Keybase.

        The passphrase is never sent. It is hardened against the account salt
        and used to sign the one-time login session instead.

        Args:
            email_or_username: The email or username of the account.
            passphrase: The passphrase for the account.

        Returns:
            The logged-in user, bound to this session.

        Raises:
            InputError: If either argument is empty. No request is sent.
            NotFoundError: If the account does not exist.
            BadCredentialError: If the passphrase is incorrect.
            PrimitiveError: If the salt or login session cannot be used.
        """
        logger.info("Starting login")

        if not email_or_username or not passphrase:
            msg = "Username and passphrase required"
            raise InputError(msg)

        with self._lock:
            if self._state is SessionState.AUTHENTICATED:
                logger.debug("Replacing existing session")
            self._clear_state()

            try:
                salt, login_session = get_salt_and_login_session(self._http, email_or_username)
                hmac_pwh = derive_authenticator(passphrase, salt, login_session)
                response = login(self._http, email_or_username, hmac_pwh, login_session)

                self._http.set_session(response["session"], response.get("csrf_token"))
                self._state = SessionState.AUTHENTICATED
                self._login_id += 1

                user = normalize_user(response["me"], session=self, login_id=self._login_id)

            except KeybaseError as e:
                self._clear_state()
                logger.warning("Login failed", error_type=type(e).__name__)
                raise
            except KeyError as e:
                self._clear_state()
                msg = "Malformed login response"
                logger.error(msg, missing=e.args[0])
                raise NormalizationError(msg, field=str(e.args[0])) from e

            logger.info("Login successful", username=user.username)
            return user

    def logout(self) -> bool:
        """
        Log out of Keybase.

        Kills every session of the user, not only this one. The local session
        ends whatever the service answers.

        Returns:
            Whether the service acknowledged the logout.
        """
        logger.info("Logging out")

        with self._lock:
            if self._state is SessionState.ANONYMOUS:
                logger.debug("Not logged in, nothing to do")
                return False

            acknowledged = False
            try:
                acknowledged = kill_all_sessions(self._http)
            except Exception as e:
                logger.warning("Logout request failed", error_type=type(e).__name__, exc_info=e)
            finally:
                self._clear_state()

            return acknowledged

    def lookup(self, username: str) -> User:
        """
        Look up a user on Keybase.

        Does not require login.

        Args:
            username: The username of the user you are searching for.

        Returns:
            The user, with the fields the service discloses publicly.

        Raises:
            InputError: If the username is empty or invalid. No request is sent.
            NotFoundError: If the user is not found.
        """
        if not username or not _USERNAME_PATTERN.fullmatch(username):
            msg = "Invalid username"
            raise InputError(msg, username=username)

        logger.debug("Looking up user", username=username)
        try:
            return normalize_user(lookup_user(self._http, username))
        except KeyError as e:
            msg = "Malformed lookup response"
            raise NormalizationError(msg, field=str(e.args[0])) from e

    def _clear_state(self) -> None:
        """Forget the session locally and in the HTTP client."""
        self._state = SessionState.ANONYMOUS
        self._http.clear_session()
