"""
HTTP client for the Keybase API.

Provides a clean interface for making API requests with session binding,
status-to-exception mapping and sanitized logging.
"""

import threading
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Self

import httpx
import structlog

from keybase_core.config import KeybaseConfig
from keybase_core.exceptions import (
    APIError,
    BadCredentialError,
    CSRFVerificationError,
    InputError,
    KeybaseError,
    NotFoundError,
    SessionError,
    TransportError,
    VerificationError,
)

logger = structlog.get_logger(__name__)

SENSITIVE_KEYS = frozenset(
    {
        "salt",
        "login_session",
        "hmac_pwh",
        "session",
        "csrf_token",
        "private_key",
        "auth_token",
        "sig",
        "passphrase",
    }
)


def sanitize_for_log(data: dict[str, Any]) -> dict[str, Any]:
    """
    Remove sensitive fields from a dict before logging.

    Recursively sanitizes nested dictionaries and lists.

    Args:
        data: Dictionary that may contain sensitive values.

    Returns:
        Copy with sensitive values replaced by "***".
    """
    result = {}
    for key, value in data.items():
        if key in SENSITIVE_KEYS:
            result[key] = "***"
        elif isinstance(value, dict):
            result[key] = sanitize_for_log(value)
        elif isinstance(value, list):
            result[key] = [
                sanitize_for_log(item) if isinstance(item, dict) else item for item in value
            ]
        else:
            result[key] = value
    return result


@dataclass(frozen=True, slots=True)
class Session:
    """Immutable session data for atomic updates."""

    session_id: str
    csrf_token: str | None = None


class KeybaseStatus(StrEnum):
    """Keybase API status names."""

    OK = "OK"
    INPUT_ERROR = "INPUT_ERROR"
    NOT_FOUND = "NOT_FOUND"
    KEY_NOT_FOUND = "KEY_NOT_FOUND"
    BAD_LOGIN_USER_NOT_FOUND = "BAD_LOGIN_USER_NOT_FOUND"
    BAD_LOGIN_PASSWORD = "BAD_LOGIN_PASSWORD"
    BAD_SESSION = "BAD_SESSION"
    LOGIN_REQUIRED = "LOGIN_REQUIRED"
    CSRF_VERIFICATION_FAILED = "CSRF_VERIFICATION_FAILED"
    BAD_SIGNATURE = "BAD_SIGNATURE"


_STATUS_ERRORS: dict[str, type[KeybaseError]] = {
    KeybaseStatus.INPUT_ERROR: InputError,
    KeybaseStatus.NOT_FOUND: NotFoundError,
    KeybaseStatus.KEY_NOT_FOUND: NotFoundError,
    KeybaseStatus.BAD_LOGIN_USER_NOT_FOUND: NotFoundError,
    KeybaseStatus.BAD_LOGIN_PASSWORD: BadCredentialError,
    KeybaseStatus.BAD_SESSION: SessionError,
    KeybaseStatus.LOGIN_REQUIRED: SessionError,
    KeybaseStatus.CSRF_VERIFICATION_FAILED: CSRFVerificationError,
    KeybaseStatus.BAD_SIGNATURE: VerificationError,
}


class HttpClient:
    """
    Synchronous HTTP client for the Keybase API.

    Owns the session cookie and CSRF token of one authenticated session.
    Callers never see them: authenticated requests pick them up implicitly.
    """

    def __init__(
        self,
        config: KeybaseConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Args:
            config: Client configuration.
            transport: Optional transport for testing (mock transport).
        """
        self._config = config
        self._transport = transport

        self._session: Session | None = None
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    def __enter__(self) -> Self:
        self._ensure_client()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _ensure_client(self) -> httpx.Client:
        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(
                    base_url=self._config.api_url,
                    timeout=self._config.timeout,
                    transport=self._transport,
                    headers={
                        "Accept": "application/json",
                        "User-Agent": self._config.user_agent,
                    },
                )
        return self._client

    def close(self) -> None:
        """Close the underlying HTTP client and drop the session."""
        with self._client_lock:
            self._session = None
            if self._client is None:
                logger.debug("Client not open.")
                return
            self._client.close()
            self._client = None

    def set_session(self, session_id: str, csrf_token: str | None = None) -> None:
        """
        Bind session credentials after login.

        Note:
            Internal use only. Called by AuthSession after a successful
            login. External callers should use AuthSession.login().

        Args:
            session_id: Session identifier issued by the service.
            csrf_token: CSRF token to send with authenticated POST requests.
        """
        self._session = Session(session_id=session_id, csrf_token=csrf_token)

    def clear_session(self) -> None:
        """
        Drop session credentials.

        Note:
            Internal use only. Called by AuthSession.logout().
        """
        self._session = None
        if self._client is not None:
            self._client.cookies.clear()

    @property
    def is_authenticated(self) -> bool:
        """Check if a session is bound."""
        return self._session is not None

    def request(
        self,
        method: str,
        endpoint: str,
        *,
        data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        authenticated: bool = True,
    ) -> dict[str, Any]:
        """
        Make an API request.

        Args:
            method: HTTP method (GET, POST).
            endpoint: API endpoint (e.g., "/getsalt.json").
            data: Form body for POST requests.
            params: Query parameters.
            authenticated: Whether to send the bound session.

        Returns:
            Response JSON data.

        Raises:
            SessionError: If authenticated is set and no session is bound,
                or the service rejects the session.
            TransportError: If the request fails at the network or HTTP level.
            KeybaseError: The subclass matching the service status.
        """
        session = self._session  # Capture atomically for consistent reads
        headers = {}
        body = dict(data) if data is not None else None

        if authenticated:
            if session is None:
                msg = "No session bound. Call login() first."
                raise SessionError(msg, endpoint=endpoint)
            headers["Cookie"] = f"session={session.session_id}"
            if method.upper() != "GET" and session.csrf_token is not None:
                body = {**(body or {}), "csrf_token": session.csrf_token}

        client = self._ensure_client()
        logger.debug(
            "API request",
            method=method,
            endpoint=endpoint,
            params=sanitize_for_log(params or {}),
            data=sanitize_for_log(body or {}),
        )

        try:
            response = client.request(
                method=method,
                url=endpoint,
                data=body,
                params=params,
                headers=headers,
            )
        except httpx.HTTPError as e:
            msg = f"Request to {endpoint} failed: {type(e).__name__}"
            raise TransportError(msg) from e

        if response.status_code >= httpx.codes.INTERNAL_SERVER_ERROR:
            msg = f"Server error on {endpoint}"
            raise TransportError(msg, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            msg = f"Invalid JSON response from {endpoint}"
            raise TransportError(msg, status_code=response.status_code) from e

        if not isinstance(payload, dict):
            msg = f"Unexpected response body from {endpoint}"
            raise TransportError(msg, status_code=response.status_code)

        status = payload.get("status") or {}
        if not isinstance(status, dict):
            msg = f"Unexpected status in response from {endpoint}"
            raise TransportError(msg, status_code=response.status_code)
        if status.get("name") != KeybaseStatus.OK:
            self._raise_api_error(status, endpoint)

        return payload

    @staticmethod
    def _raise_api_error(status: dict[str, Any], endpoint: str) -> None:
        name = status.get("name")
        code = status.get("code", 0)
        desc = status.get("desc") or name or "Unknown error"

        logger.debug("API error", endpoint=endpoint, status=name, code=code)

        error_class = _STATUS_ERRORS.get(name)
        if error_class is not None:
            raise error_class(desc, endpoint=endpoint)

        msg = f"{desc} (code={code})"
        raise APIError(msg, code=code, name=name, endpoint=endpoint)
