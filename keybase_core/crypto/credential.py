"""
Login authenticator derivation.

The passphrase never leaves the client. Instead it is hardened with scrypt
against the account salt, and the result keys an HMAC-SHA512 over the
one-time login session issued by the service:

    password_hash = scrypt(passphrase, salt)[192:224]
    authenticator = HMAC-SHA512(password_hash, login_session)
"""

import base64
import binascii

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from keybase_core.exceptions import InputError, PrimitiveError

SCRYPT_COST = 2**15
SCRYPT_BLOCK_SIZE = 8
SCRYPT_PARALLELISM = 1
SCRYPT_LENGTH = 224
PASSWORD_HASH_OFFSET = 192


def harden_passphrase(passphrase: str, salt: str) -> bytes:
    """
    Derive the password hash from a passphrase and the account salt.

    Args:
        passphrase: Account passphrase.
        salt: Hex-encoded salt returned by the service.

    Returns:
        The 32-byte password hash.

    Raises:
        PrimitiveError: If the salt is not hex or scrypt rejects its inputs.
    """
    try:
        salt_bytes = bytes.fromhex(salt)
    except (TypeError, ValueError) as e:
        msg = "Salt is not valid hex"
        raise PrimitiveError(msg) from e

    try:
        kdf = Scrypt(
            salt=salt_bytes,
            length=SCRYPT_LENGTH,
            n=SCRYPT_COST,
            r=SCRYPT_BLOCK_SIZE,
            p=SCRYPT_PARALLELISM,
        )
        derived = kdf.derive(passphrase.encode("utf-8"))
    except (TypeError, ValueError, MemoryError, UnsupportedAlgorithm) as e:
        msg = "scrypt rejected its inputs"
        raise PrimitiveError(msg, error_type=type(e).__name__) from e

    return derived[PASSWORD_HASH_OFFSET:]


def keyed_hash(password_hash: bytes, login_session: str) -> str:
    """
    HMAC-SHA512 of the decoded login session, keyed by the password hash.

    Args:
        password_hash: Output of harden_passphrase().
        login_session: Base64-encoded login session returned by the service.

    Returns:
        Hex-encoded authenticator.

    Raises:
        PrimitiveError: If the login session is not valid base64.
    """
    try:
        nonce = base64.b64decode(login_session, validate=True)
    except (binascii.Error, TypeError, ValueError) as e:
        msg = "Login session is not valid base64"
        raise PrimitiveError(msg) from e

    mac = hmac.HMAC(password_hash, hashes.SHA512())
    mac.update(nonce)
    return mac.finalize().hex()


def derive_authenticator(passphrase: str, salt: str, login_session: str) -> str:
    """
    Compute the login authenticator for one login attempt.

    Pure function of its inputs. Nothing is retained after the call.

    Args:
        passphrase: Account passphrase.
        salt: Hex-encoded salt returned by the service.
        login_session: Base64-encoded login session returned by the service.

    Returns:
        Hex-encoded authenticator to submit as `hmac_pwh`.

    Raises:
        InputError: If the passphrase is empty.
        PrimitiveError: If either primitive rejects its inputs.
    """
    if not passphrase:
        msg = "Passphrase required"
        raise InputError(msg)

    password_hash = harden_passphrase(passphrase, salt)
    return keyed_hash(password_hash, login_session)
