"""
Key registry service for Keybase.

Fetches public keys by id and manages the logged-in user's keys.
"""

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

import structlog

from keybase_core.api.endpoints.key import add_key, fetch_keys, revoke_key
from keybase_core.api.http_client import HttpClient
from keybase_core.exceptions import InputError
from keybase_core.models.key import KeyOperation, KeyRecord, encode_operations
from keybase_core.models.normalizer import normalize_key

if TYPE_CHECKING:
    from keybase_core.services.auth_service import AuthSession

logger = structlog.get_logger(__name__)


class KeyRegistry:
    """
    Add, revoke and fetch keys.

    Fetching is public. Adding and revoking need an authenticated
    AuthSession, passed explicitly to each call.

    Upload order is a caller contract: a private key is only accepted once
    the matching public key has been uploaded. The registry cannot check
    this itself, so a violation comes back as a service error.
    """

    def __init__(self, http_client: HttpClient) -> None:
        """
        Args:
            http_client: HTTP client used for public requests.
        """
        self._http = http_client

    def fetch_keys(
        self,
        key_ids: Sequence[str],
        operations: Iterable[KeyOperation | str],
    ) -> list[KeyRecord]:
        """
        Fetch keys by PGP key id.

        Args:
            key_ids: Key ids, ex: ["6052b2ad31a6631c", "980A3F0D01FE04DF"].
            operations: Requested operations, ex: [KeyOperation.ENCRYPT, "verify"].

        Returns:
            Keys in the order the service returns them.

        Raises:
            InputError: If key_ids or operations are empty or invalid. No request is sent.
        """
        if isinstance(key_ids, str):
            msg = "key_ids must be a sequence of key ids, not a string"
            raise InputError(msg)

        ids = list(key_ids)
        if not ids:
            msg = "At least one key id required"
            raise InputError(msg)
        for kid in ids:
            if not isinstance(kid, str) or not kid.strip() or "," in kid:
                msg = "Invalid key id"
                raise InputError(msg, key_id=kid)

        ops = encode_operations(operations)

        logger.debug("Fetching keys", count=len(ids), ops=ops)
        raw_keys = fetch_keys(self._http, ids, ops)
        return [normalize_key(key, field=f"keys[{i}]") for i, key in enumerate(raw_keys)]

    def add_public_key(self, session: "AuthSession", armored_key: str) -> str:
        """
        Add a new public key.

        Args:
            session: Authenticated session.
            armored_key: ASCII-armored public key.

        Returns:
            The key id for the uploaded key.

        Raises:
            InputError: If the key is empty.
            SessionError: If the session is not authenticated or no longer valid.
        """
        if not armored_key or not armored_key.strip():
            msg = "Public key required"
            raise InputError(msg)

        http = session.require_authenticated()
        kid = add_key(http, public_key=armored_key)
        logger.info("Public key added", kid=kid)
        return kid

    def add_private_key(self, session: "AuthSession", encoded_key: str) -> str:
        """
        Add a new private key.

        Precondition: the matching public key was uploaded first.

        Args:
            session: Authenticated session.
            encoded_key: Encoded private key, kept opaque.

        Returns:
            The key id for the uploaded key.

        Raises:
            InputError: If the key is empty.
            SessionError: If the session is not authenticated or no longer valid.
        """
        if not encoded_key or not encoded_key.strip():
            msg = "Private key required"
            raise InputError(msg)

        http = session.require_authenticated()
        kid = add_key(http, private_key=encoded_key)
        logger.info("Private key added", kid=kid)
        return kid

    def revoke_key(self, session: "AuthSession", kid: str) -> bool:
        """
        Revoke a key.

        Currently the key is simply deleted. Full revocation is due in later
        revisions of the API.

        Args:
            session: Authenticated session.
            kid: The key id to be revoked.

        Returns:
            True once the service confirmed the deletion.

        Raises:
            InputError: If the key id is empty.
            SessionError: If the session is not authenticated or no longer valid.
            NotFoundError: If the key does not belong to the user.
        """
        if not kid or not kid.strip():
            msg = "Key id required"
            raise InputError(msg)

        http = session.require_authenticated()
        revoked = revoke_key(http, kid)
        logger.info("Key revoked", kid=kid)
        return revoked
