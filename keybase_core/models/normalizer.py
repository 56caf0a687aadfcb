"""
Normalization of raw directory records into domain models.

The service returns nested mappings whose optional parts may be missing
entirely. Everything here is a pure function: absent timestamps become
None, absent collections become empty, and integer flags are true only
when they equal 1.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

from keybase_core.exceptions import NormalizationError
from keybase_core.models.key import KeyBundle, KeyRecord
from keybase_core.models.user import Email, User, UserBasics, UserProfile

_KEY_FIELDS = frozenset(
    {
        "kid",
        "key_fingerprint",
        "fingerprint",
        "bundle",
        "ctime",
        "mtime",
        "self_signed",
        "secret",
        "primary_bundle_in_keyring",
        "uid",
        "username",
        "key_type",
    }
)
_BASICS_FIELDS = frozenset({"username", "ctime", "mtime"})
_PROFILE_FIELDS = frozenset({"bio", "full_name", "location", "mtime"})


def parse_timestamp(timestamp: int | float | None, field: str = "timestamp") -> datetime | None:
    """
    Parse Unix timestamp to UTC datetime.

    Raises:
        NormalizationError: If the value is not a number or is out of range.
    """
    if timestamp is None:
        return None
    if isinstance(timestamp, bool) or not isinstance(timestamp, int | float):
        msg = f"Expected a Unix timestamp for {field}, got {type(timestamp).__name__}"
        raise NormalizationError(msg, field=field)
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        msg = f"Timestamp out of range for {field}"
        raise NormalizationError(msg, field=field) from e


def is_flag_set(value: Any) -> bool:
    """Integer flags are set only when exactly 1."""
    return type(value) is int and value == 1


def _require_mapping(data: Any, field: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        msg = f"Expected a mapping for {field}, got {type(data).__name__}"
        raise NormalizationError(msg, field=field)
    return data


def _extra(data: Mapping[str, Any], known: frozenset[str]) -> Mapping[str, Any]:
    return MappingProxyType({k: v for k, v in data.items() if k not in known})


def normalize_key(data: Mapping[str, Any], *, field: str = "key") -> KeyRecord:
    """
    Normalize one raw key record.

    Args:
        data: Raw key data.
        field: Location of the record, used in error messages.

    Returns:
        The normalized KeyRecord.

    Raises:
        NormalizationError: If data is not a mapping or a timestamp is malformed.
    """
    data = _require_mapping(data, field)
    return KeyRecord(
        kid=data.get("kid"),
        fingerprint=data.get("key_fingerprint", data.get("fingerprint")),
        bundle=data.get("bundle"),
        created_at=parse_timestamp(data.get("ctime"), f"{field}.ctime"),
        updated_at=parse_timestamp(data.get("mtime"), f"{field}.mtime"),
        self_signed=is_flag_set(data.get("self_signed")),
        secret=is_flag_set(data.get("secret")),
        primary_bundle_in_keyring=is_flag_set(data.get("primary_bundle_in_keyring")),
        uid=data.get("uid"),
        username=data.get("username"),
        key_type=data.get("key_type"),
        extra=_extra(data, _KEY_FIELDS),
    )


def _normalize_keyed_collection(data: Any, field: str) -> tuple[KeyRecord, ...]:
    # The mapping keys are dropped; only the key data is kept, in service order.
    if data is None:
        return ()
    data = _require_mapping(data, field)
    return tuple(
        normalize_key(value, field=f"{field}.{name}") for name, value in data.items()
    )


def _normalize_families(data: Any, field: str) -> Mapping[str, tuple[KeyRecord, ...]]:
    if data is None:
        return MappingProxyType({})
    data = _require_mapping(data, field)

    families = {}
    for name, keys in data.items():
        if not isinstance(keys, list | tuple):
            msg = f"Expected a list for {field}.{name}, got {type(keys).__name__}"
            raise NormalizationError(msg, field=f"{field}.{name}")
        families[name] = tuple(
            normalize_key(key, field=f"{field}.{name}[{i}]") for i, key in enumerate(keys)
        )
    return MappingProxyType(families)


def normalize_key_bundle(data: Mapping[str, Any], *, field: str = "keys") -> KeyBundle:
    """
    Normalize a public_keys or private_keys record.

    Args:
        data: Raw bundle with primary and optional subkeys, sibkeys, families.
        field: Location of the record, used in error messages.

    Returns:
        The normalized KeyBundle.

    Raises:
        NormalizationError: If the primary key is missing or a part has the wrong shape.
    """
    data = _require_mapping(data, field)

    primary = data.get("primary")
    if primary is None:
        msg = f"Missing primary key in {field}"
        raise NormalizationError(msg, field=f"{field}.primary")

    return KeyBundle(
        primary=normalize_key(primary, field=f"{field}.primary"),
        subkeys=_normalize_keyed_collection(data.get("subkeys"), f"{field}.subkeys"),
        sibkeys=_normalize_keyed_collection(data.get("sibkeys"), f"{field}.sibkeys"),
        families=_normalize_families(data.get("families"), f"{field}.families"),
    )


def normalize_emails(data: Mapping[str, Any]) -> Mapping[str, Email]:
    """Normalize the email slots of a user record."""
    data = _require_mapping(data, "emails")

    emails = {}
    for slot, info in data.items():
        info = _require_mapping(info, f"emails.{slot}")
        emails[slot] = Email(
            address=info.get("email"),
            is_verified=is_flag_set(info.get("is_verified")),
        )
    return MappingProxyType(emails)


def normalize_basics(data: Mapping[str, Any]) -> UserBasics:
    data = _require_mapping(data, "basics")
    return UserBasics(
        username=data.get("username"),
        created_at=parse_timestamp(data.get("ctime"), "basics.ctime"),
        updated_at=parse_timestamp(data.get("mtime"), "basics.mtime"),
        extra=_extra(data, _BASICS_FIELDS),
    )


def normalize_profile(data: Mapping[str, Any]) -> UserProfile:
    data = _require_mapping(data, "profile")
    return UserProfile(
        bio=data.get("bio"),
        full_name=data.get("full_name"),
        location=data.get("location"),
        updated_at=parse_timestamp(data.get("mtime"), "profile.mtime"),
        extra=_extra(data, _PROFILE_FIELDS),
    )


def normalize_user(
    data: Mapping[str, Any],
    *,
    session: Any = None,
    login_id: int | None = None,
) -> User:
    """
    Normalize a raw user record.

    Args:
        data: Raw user record, as returned by lookup or in the login `me` field.
        session: AuthSession to bind, for users produced by login.
        login_id: The login of that session the user belongs to.

    Returns:
        The normalized User.

    Raises:
        NormalizationError: If the record or one of its parts has the wrong shape.
    """
    data = _require_mapping(data, "user")

    basics = data.get("basics")
    profile = data.get("profile")
    emails = data.get("emails")
    public_keys = data.get("public_keys")
    private_keys = data.get("private_keys")
    invitation_stats = data.get("invitation_stats")

    return User(
        id=data.get("id"),
        basics=normalize_basics(basics) if basics is not None else None,
        profile=normalize_profile(profile) if profile is not None else None,
        emails=normalize_emails(emails) if emails is not None else MappingProxyType({}),
        public_keys=(
            normalize_key_bundle(public_keys, field="public_keys")
            if public_keys is not None
            else None
        ),
        private_keys=(
            normalize_key_bundle(private_keys, field="private_keys")
            if private_keys is not None
            else None
        ),
        invitation_stats=MappingProxyType(
            dict(_require_mapping(invitation_stats, "invitation_stats"))
            if invitation_stats is not None
            else {}
        ),
        session=session,
        login_id=login_id,
    )
