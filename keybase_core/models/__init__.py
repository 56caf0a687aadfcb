"""
Domain models for the Keybase client.

These are immutable (frozen) dataclasses representing directory records.
"""

from keybase_core.models.key import (
    KeyBundle,
    KeyOperation,
    KeyRecord,
    encode_operations,
)
from keybase_core.models.user import (
    Email,
    User,
    UserBasics,
    UserProfile,
)

__all__ = [
    # Keys
    "KeyOperation",
    "KeyRecord",
    "KeyBundle",
    "encode_operations",
    # Users
    "User",
    "UserBasics",
    "UserProfile",
    "Email",
]
