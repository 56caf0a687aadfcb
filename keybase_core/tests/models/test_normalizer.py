from datetime import datetime, timezone

import pytest

from keybase_core.exceptions import NormalizationError
from keybase_core.models.normalizer import (
    is_flag_set,
    normalize_emails,
    normalize_key,
    normalize_key_bundle,
    normalize_user,
    parse_timestamp,
)

CTIME = 1386537779
CTIME_UTC = datetime(2013, 12, 8, 21, 22, 59, tzinfo=timezone.utc)


def make_key(kid: str = "0101aa", **fields: object) -> dict:
    return {
        "kid": kid,
        "key_fingerprint": "da99a6ebeca98b14d944cb6e1ca9bfeab344f0fc",
        "bundle": "-----BEGIN PGP PUBLIC KEY BLOCK-----",
        "ctime": CTIME,
        "mtime": CTIME + 60,
        **fields,
    }


def make_me() -> dict:
    return {
        "id": "15a9e2826313eaf005291a1ae00c3f00",
        "basics": {"username": "chris", "ctime": CTIME, "mtime": CTIME + 10, "salt": "x"},
        "profile": {"bio": "Keybase user", "full_name": "Chris", "mtime": CTIME + 20},
        "emails": {
            "primary": {"email": "chris@example.com", "is_verified": 1},
        },
        "public_keys": {
            "primary": make_key("pub", self_signed=1, primary_bundle_in_keyring=1),
        },
        "private_keys": {
            "primary": make_key("priv", secret=1),
        },
        "invitation_stats": {"available": 2, "used": 1},
    }


# Timestamps and flags


def test_parse_timestamp_returns_utc_datetime() -> None:
    assert parse_timestamp(CTIME) == CTIME_UTC


def test_parse_timestamp_returns_none_when_absent() -> None:
    assert parse_timestamp(None) is None


@pytest.mark.parametrize("value", ["1386537779", True, [CTIME], 10**20, float("nan")])
def test_parse_timestamp_raises_normalization_error_on_bad_value(value: object) -> None:
    with pytest.raises(NormalizationError) as exc_info:
        parse_timestamp(value, "basics.ctime")

    assert exc_info.value.field == "basics.ctime"


def test_normalize_key_reports_malformed_timestamp_location() -> None:
    with pytest.raises(NormalizationError) as exc_info:
        normalize_key({"kid": "0101aa", "ctime": "1386537779"}, field="keys[0]")

    assert exc_info.value.field == "keys[0].ctime"


@pytest.mark.parametrize(
    "value,expected",
    [(1, True), (0, False), (None, False), (2, False), ("1", False), (True, False)],
)
def test_is_flag_set_only_for_integer_one(value: object, expected: bool) -> None:
    assert is_flag_set(value) is expected


# Keys


def test_normalize_key_maps_fields() -> None:
    key = normalize_key(make_key(self_signed=1, secret=0, primary_bundle_in_keyring=1))

    assert key.kid == "0101aa"
    assert key.fingerprint == "da99a6ebeca98b14d944cb6e1ca9bfeab344f0fc"
    assert key.bundle.startswith("-----BEGIN")
    assert key.created_at == CTIME_UTC
    assert key.updated_at == datetime(2013, 12, 8, 21, 23, 59, tzinfo=timezone.utc)
    assert key.self_signed is True
    assert key.secret is False
    assert key.primary_bundle_in_keyring is True


def test_normalize_key_without_epochs_has_no_timestamps() -> None:
    key = normalize_key({"kid": "0101aa"})

    assert key.created_at is None
    assert key.updated_at is None
    assert key.self_signed is False


def test_normalize_key_keeps_unmapped_fields() -> None:
    key = normalize_key(make_key(key_level=3, uid="u1", username="chris", key_type=1))

    assert key.extra == {"key_level": 3}
    assert key.uid == "u1"
    assert key.username == "chris"
    assert key.key_type == 1


def test_normalize_key_raises_on_non_mapping() -> None:
    with pytest.raises(NormalizationError):
        normalize_key(["kid"])


# Bundles


def test_normalize_key_bundle_with_primary_only() -> None:
    bundle = normalize_key_bundle({"primary": make_key()})

    assert bundle.primary.kid == "0101aa"
    assert bundle.subkeys == ()
    assert bundle.sibkeys == ()
    assert dict(bundle.families) == {}


def test_normalize_key_bundle_parses_subkey_values_in_order() -> None:
    bundle = normalize_key_bundle(
        {
            "primary": make_key(),
            "subkeys": {"x": make_key("sub-1"), "y": make_key("sub-2")},
            "sibkeys": {"z": make_key("sib-1")},
        }
    )

    assert [k.kid for k in bundle.subkeys] == ["sub-1", "sub-2"]
    assert [k.kid for k in bundle.sibkeys] == ["sib-1"]


def test_normalize_key_bundle_keeps_sibkeys_apart_from_subkeys() -> None:
    bundle = normalize_key_bundle(
        {
            "primary": make_key(),
            "sibkeys": {"s2": make_key("sib-2"), "s1": make_key("sib-1")},
            "subkeys": {"b": make_key("sub-2"), "a": make_key("sub-1")},
        }
    )

    assert [k.kid for k in bundle.subkeys] == ["sub-2", "sub-1"]
    assert [k.kid for k in bundle.sibkeys] == ["sib-2", "sib-1"]
    assert not {k.kid for k in bundle.subkeys} & {k.kid for k in bundle.sibkeys}


def test_normalize_key_bundle_with_empty_key_collections() -> None:
    bundle = normalize_key_bundle({"primary": make_key(), "subkeys": {}, "sibkeys": {}})

    assert bundle.subkeys == ()
    assert bundle.sibkeys == ()


def test_normalize_key_bundle_parses_families() -> None:
    bundle = normalize_key_bundle(
        {
            "primary": make_key(),
            "families": {
                "laptop": [make_key("fam-1"), make_key("fam-2")],
                "phone": [],
            },
        }
    )

    assert [k.kid for k in bundle.families["laptop"]] == ["fam-1", "fam-2"]
    assert bundle.families["phone"] == ()


def test_normalize_key_bundle_raises_on_missing_primary() -> None:
    with pytest.raises(NormalizationError, match="Missing primary key") as exc_info:
        normalize_key_bundle({"subkeys": {}}, field="public_keys")

    assert exc_info.value.field == "public_keys.primary"


def test_normalize_key_bundle_raises_on_malformed_family() -> None:
    with pytest.raises(NormalizationError):
        normalize_key_bundle({"primary": make_key(), "families": {"laptop": "oops"}})


# Emails


@pytest.mark.parametrize("is_verified,expected", [(1, True), (0, False), (None, False)])
def test_normalize_emails_maps_verification(is_verified: int | None, expected: bool) -> None:
    info = {"email": "chris@example.com"}
    if is_verified is not None:
        info["is_verified"] = is_verified

    emails = normalize_emails({"primary": info})

    assert emails["primary"].address == "chris@example.com"
    assert emails["primary"].is_verified is expected


# Users


def test_normalize_user_populates_full_record() -> None:
    user = normalize_user(make_me())

    assert user.id == "15a9e2826313eaf005291a1ae00c3f00"
    assert user.username == "chris"
    assert user.basics.created_at == CTIME_UTC
    assert user.basics.extra == {"salt": "x"}
    assert user.profile.bio == "Keybase user"
    assert user.profile.full_name == "Chris"
    assert user.profile.updated_at == parse_timestamp(CTIME + 20)
    assert user.emails["primary"].is_verified is True
    assert user.public_keys.primary.self_signed is True
    assert user.private_keys.primary.secret is True
    assert user.invitation_stats == {"available": 2, "used": 1}
    assert user.session is None


def test_normalize_user_with_partial_record() -> None:
    user = normalize_user({"id": "u1", "basics": {"username": "chris"}})

    assert user.username == "chris"
    assert user.basics.created_at is None
    assert user.profile is None
    assert dict(user.emails) == {}
    assert user.public_keys is None
    assert user.private_keys is None
    assert dict(user.invitation_stats) == {}


def test_normalize_user_attaches_session() -> None:
    session = object()

    user = normalize_user({"id": "u1"}, session=session)

    assert user.session is session


def test_normalize_user_raises_on_non_mapping() -> None:
    with pytest.raises(NormalizationError):
        normalize_user(None)
