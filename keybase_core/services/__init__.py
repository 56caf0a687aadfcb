"""
Business logic services for the Keybase client.
"""

from keybase_core.services.auth_service import AuthSession, SessionState
from keybase_core.services.key_service import KeyRegistry
from keybase_core.services.sig_service import SignaturePoster, expected_auth_token

__all__ = [
    "AuthSession",
    "KeyRegistry",
    "SessionState",
    "SignaturePoster",
    "expected_auth_token",
]
