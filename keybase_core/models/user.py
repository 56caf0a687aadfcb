"""
User-related domain models.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from keybase_core.exceptions import InputError, SessionError
from keybase_core.models.key import KeyBundle

if TYPE_CHECKING:
    from keybase_core.services.auth_service import AuthSession


def _empty() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True, kw_only=True)
class UserBasics:
    """
    Attributes:
        username: Keybase username.
        created_at: When the account was created.
        updated_at: When the basics were last modified.
        extra: Raw fields not mapped above.
    """

    username: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    extra: Mapping[str, Any] = field(default_factory=_empty)


@dataclass(frozen=True, kw_only=True)
class UserProfile:
    """
    Attributes:
        bio: Free-form biography.
        full_name: Display name.
        location: Free-form location.
        updated_at: When the profile was last modified.
        extra: Raw fields not mapped above.
    """

    bio: str | None = None
    full_name: str | None = None
    location: str | None = None
    updated_at: datetime | None = None
    extra: Mapping[str, Any] = field(default_factory=_empty)


@dataclass(frozen=True, kw_only=True)
class Email:
    """An email slot of a user."""

    address: str | None = None
    is_verified: bool = False


@dataclass(frozen=True, kw_only=True)
class User:
    """
    A Keybase user containing all attributes you have permission to see.

    Users returned by lookup carry no session. Users returned by login are
    bound to the login that produced them, and expose the privileged
    operations of that session until it logs out or logs in again.
    """

    id: str | None = None
    basics: UserBasics | None = None
    profile: UserProfile | None = None
    emails: Mapping[str, Email] = field(default_factory=_empty)
    public_keys: KeyBundle | None = None
    private_keys: KeyBundle | None = None
    invitation_stats: Mapping[str, Any] = field(default_factory=_empty)
    session: "AuthSession | None" = field(default=None, compare=False, repr=False)
    login_id: int | None = field(default=None, compare=False, repr=False)

    @property
    def username(self) -> str | None:
        """Shortcut for basics.username."""
        return self.basics.username if self.basics is not None else None

    def add_public_key(self, armored_key: str) -> str:
        """
        Add a new public key.

        Args:
            armored_key: ASCII-armored public key.

        Returns:
            The key id for the uploaded key.

        Raises:
            InputError: If the key is empty.
            SessionError: If this user is not bound to a live session.
        """
        session = self._require_session()
        return session.keys.add_public_key(session, armored_key)

    def add_private_key(self, encoded_key: str) -> str:
        """
        Add a new private key.

        The matching public key must have been uploaded first.

        Args:
            encoded_key: Encoded private key, kept opaque.

        Returns:
            The key id for the uploaded key.
        """
        session = self._require_session()
        return session.keys.add_private_key(session, encoded_key)

    def revoke_key(self, kid: str) -> bool:
        """
        Revoke a key.

        Currently the key is simply deleted. Full revocation is due in later
        revisions of the API.
        """
        session = self._require_session()
        return session.keys.revoke_key(session, kid)

    def post_auth(self, sig: str) -> str:
        """
        Post a self-signed authentication certificate for this user.

        Args:
            sig: The whole certificate contents.

        Returns:
            The authentication token.

        Raises:
            InputError: If the certificate is empty or the user has no username.
            SessionError: If this user is not bound to a live session.
        """
        if not sig or not sig.strip():
            msg = "Signature required"
            raise InputError(msg)

        session = self._require_session()

        if not self.username:
            msg = "Username required"
            raise InputError(msg, user_id=self.id)

        return session.signatures.post_auth(session, self.username, sig)

    def logout(self) -> bool:
        """Log out of the session this user is bound to."""
        return self._require_session().logout()

    def _require_session(self) -> "AuthSession":
        if self.session is None:
            msg = "User is not bound to a session. Use login() first."
            raise SessionError(msg)
        self.session.require_authenticated(self.login_id)
        return self.session
