"""
Key-related domain models.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntFlag
from types import MappingProxyType
from typing import Any

from keybase_core.exceptions import InputError


class KeyOperation(IntFlag):
    """Operations a fetched key is requested for. Bitmaskable."""

    ENCRYPT = 1
    DECRYPT = 2
    VERIFY = 4
    SIGN = 8


def encode_operations(operations: Iterable[KeyOperation | str]) -> int:
    """
    Encode a set of operations as the `ops` bitmask.

    Args:
        operations: KeyOperation members or their names, ex: ["encrypt", "verify"].

    Returns:
        Bitwise OR of the operation tags.

    Raises:
        InputError: If the set is empty or contains an unknown operation.
    """
    mask = KeyOperation(0)
    for op in operations:
        if isinstance(op, KeyOperation):
            mask |= op
            continue
        if not isinstance(op, str) or op.upper() not in KeyOperation.__members__:
            msg = f"Unknown key operation: {op!r}"
            raise InputError(msg)
        mask |= KeyOperation[op.upper()]

    if not mask:
        msg = "At least one key operation required"
        raise InputError(msg)
    return int(mask)


@dataclass(frozen=True, kw_only=True)
class KeyRecord:
    """
    Directory metadata for one key.

    Attributes:
        kid: Keybase key id.
        fingerprint: PGP fingerprint, if the key is a PGP key.
        bundle: Armored or encoded key material, kept opaque.
        created_at: When the key was added.
        updated_at: When the key was last modified.
        self_signed: Whether the key carries a self-signature.
        secret: Whether this is secret key material.
        primary_bundle_in_keyring: Whether the primary bundle is in the keyring.
        uid: Owner's user id (fetched keys only).
        username: Owner's username (fetched keys only).
        key_type: Numeric key type reported by the service.
        extra: Raw fields not mapped above.
    """

    kid: str | None = None
    fingerprint: str | None = None
    bundle: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    self_signed: bool = False
    secret: bool = False
    primary_bundle_in_keyring: bool = False
    uid: str | None = None
    username: str | None = None
    key_type: int | None = None
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True, kw_only=True)
class KeyBundle:
    """
    A user's key material of one class (public or private).

    Attributes:
        primary: The primary key. Always present.
        subkeys: Subkeys in service order.
        sibkeys: Sibling keys in service order.
        families: Key families by name.
    """

    primary: KeyRecord
    subkeys: tuple[KeyRecord, ...] = ()
    sibkeys: tuple[KeyRecord, ...] = ()
    families: Mapping[str, tuple[KeyRecord, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def all_keys(self) -> tuple[KeyRecord, ...]:
        """Primary, subkeys, sibkeys and family keys, in that order."""
        family_keys = tuple(key for keys in self.families.values() for key in keys)
        return (self.primary, *self.subkeys, *self.sibkeys, *family_keys)

    def find(self, kid: str) -> KeyRecord | None:
        """Find a key in the bundle by its kid."""
        for key in self.all_keys():
            if key.kid == kid:
                return key
        return None
