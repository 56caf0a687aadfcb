"""
Keybase Python Client.

A Python client for the Keybase directory: login, key management and
authentication signatures.

Example:
    ```python
    from keybase_core import KeybaseClient

    with KeybaseClient() as client:
        me = client.login("chris", "passphrase")
        print(me.public_keys.primary.fingerprint)

        kid = me.add_public_key(armored_key)
        me.logout()
    ```
"""

from keybase_core.client import KeybaseClient
from keybase_core.config import KeybaseConfig
from keybase_core.exceptions import (
    APIError,
    BadCredentialError,
    CSRFVerificationError,
    InputError,
    KeybaseError,
    NormalizationError,
    NotFoundError,
    PrimitiveError,
    SessionError,
    TransportError,
    VerificationError,
)
from keybase_core.models.key import KeyBundle, KeyOperation, KeyRecord
from keybase_core.models.user import Email, User, UserBasics, UserProfile
from keybase_core.services.auth_service import AuthSession, SessionState

__version__ = "0.1.0"

__all__ = [
    # Main client
    "KeybaseClient",
    "KeybaseConfig",
    "AuthSession",
    "SessionState",
    # Models
    "User",
    "UserBasics",
    "UserProfile",
    "Email",
    "KeyBundle",
    "KeyRecord",
    "KeyOperation",
    # Exceptions
    "KeybaseError",
    "InputError",
    "NotFoundError",
    "BadCredentialError",
    "SessionError",
    "CSRFVerificationError",
    "VerificationError",
    "PrimitiveError",
    "NormalizationError",
    "TransportError",
    "APIError",
]
