"""
Keybase client exception hierarchy.

All exceptions inherit from KeybaseError for easy catching.
"""

from typing import Any


class KeybaseError(Exception):
    """Base exception for all keybase_core errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class InputError(KeybaseError):
    """Caller-supplied arguments are empty or malformed."""


class NotFoundError(KeybaseError):
    """Unknown user or key identifier."""


class BadCredentialError(KeybaseError):
    """Passphrase does not match the account."""


class SessionError(KeybaseError):
    """Operation requires an authenticated session, or the session is no longer valid."""


class CSRFVerificationError(SessionError):
    """The CSRF token sent with an authenticated request was rejected."""


class VerificationError(KeybaseError):
    """Signature or auth token verification failed."""


class PrimitiveError(KeybaseError):
    """A cryptographic primitive rejected its inputs."""


class NormalizationError(KeybaseError):
    """A directory record does not have the expected shape."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message, field=field)
        self.field = field


class TransportError(KeybaseError):
    """Network-level failure, HTTP 5xx or an undecodable response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message, status_code=status_code)
        self.status_code = status_code


class APIError(KeybaseError):
    """The service answered with a status the client does not recognise."""

    def __init__(
        self, message: str, *, code: int, name: str | None = None, endpoint: str | None = None
    ) -> None:
        super().__init__(message, code=code, name=name, endpoint=endpoint)
        self.code = code
        self.name = name
        self.endpoint = endpoint
