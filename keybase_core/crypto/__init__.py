"""
Cryptographic operations for the Keybase client.

This module provides:
- Passphrase hardening (scrypt)
- Login authenticator derivation (HMAC-SHA512)
"""

from keybase_core.crypto.credential import derive_authenticator, harden_passphrase, keyed_hash

__all__ = [
    "derive_authenticator",
    "harden_passphrase",
    "keyed_hash",
]
