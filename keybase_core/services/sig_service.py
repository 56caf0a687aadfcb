"""
Signature service for Keybase.

Posts self-signed authentication certificates and checks the returned token.
"""

import hashlib
import hmac
import re
from typing import TYPE_CHECKING

import structlog

from keybase_core.api.endpoints.sig import post_auth
from keybase_core.exceptions import InputError, VerificationError

if TYPE_CHECKING:
    from keybase_core.services.auth_service import AuthSession

logger = structlog.get_logger(__name__)

_ARMOR_PATTERN = re.compile(r"-----BEGIN [^-\r\n]+-----.*?-----END [^-\r\n]+-----", re.DOTALL)


def expected_auth_token(sig: str) -> str | None:
    """
    Compute the auth token the service should return for a certificate.

    The token is the SHA-256 digest of the armored block, from the opening
    "-----BEGIN" through the closing "-----END ...-----" delimiter.

    Args:
        sig: The whole certificate contents.

    Returns:
        Hex digest, or None if the certificate carries no armor.
    """
    match = _ARMOR_PATTERN.search(sig)
    if match is None:
        return None
    return hashlib.sha256(match.group(0).encode("utf-8")).hexdigest()


class SignaturePoster:
    """
    Submit self-signed authentication certificates.

    The certificate is opaque here. Its payload should take the form of
    other Keybase signatures, for example:

        {
          "body": {
            "key": {
              "fingerprint": "da99a6ebeca98b14d944cb6e1ca9bfeab344f0fc",
              "host": "keybase.io",
              "key_id": "1ca9bfeab344f0fc",
              "uid": "15a9e2826313eaf005291a1ae00c3f00",
              "username": "taco422107"
            },
            "nonce": null,
            "type": "auth",
            "version": 1
          },
          "ctime": 1386537779,
          "expire_in": 86400,
          "tag": "signature"
        }

    The service verifies the signature and answers with the auth token.
    """

    def __init__(self, *, verify_tokens: bool = True) -> None:
        """
        Args:
            verify_tokens: Compare returned tokens with expected_auth_token().
        """
        self._verify_tokens = verify_tokens

    def post_auth(self, session: "AuthSession", username: str, sig: str) -> str:
        """
        Post a self-signed authentication certificate.

        Args:
            session: Authenticated session.
            username: User the certificate was signed for.
            sig: The whole certificate contents.

        Returns:
            The authentication token.

        Raises:
            InputError: If the certificate or username is empty.
            SessionError: If the session is not authenticated or no longer valid.
            VerificationError: If the service rejects the signature, or the
                token does not match the certificate.
        """
        if not sig or not sig.strip():
            msg = "Signature required"
            raise InputError(msg)

        http = session.require_authenticated()

        if not username:
            msg = "Username required"
            raise InputError(msg)

        logger.info("Posting auth signature", username=username)
        token = post_auth(http, username, sig)

        if self._verify_tokens:
            self._check_token(sig, token)

        return token

    @staticmethod
    def _check_token(sig: str, token: str) -> None:
        expected = expected_auth_token(sig)
        if expected is None:
            logger.debug("Certificate is not armored, skipping token check")
            return

        # Use constant-time comparison to prevent timing attacks
        if not hmac.compare_digest(expected.encode(), str(token).lower().encode("utf-8")):
            msg = "Auth token does not match the posted certificate"
            raise VerificationError(msg)
