"""Key-related API endpoints."""

from collections.abc import Sequence
from typing import Any

from keybase_core.api.http_client import HttpClient


def fetch_keys(http: HttpClient, key_ids: Sequence[str], ops: int) -> list[dict[str, Any]]:
    """
    Fetch public keys by PGP key id.

    Args:
        http: Configured HTTP client.
        key_ids: PGP key ids, ex: ["6052b2ad31a6631c", "980A3F0D01FE04DF"].
        ops: Bitmask of requested operations (encrypt=1, decrypt=2, verify=4, sign=8).

    Returns:
        Raw key records in the order returned by the service.
    """
    response = http.request(
        "GET",
        "/key/fetch.json",
        params={"pgp_key_ids": ",".join(key_ids), "ops": ops},
        authenticated=False,
    )
    return response.get("keys") or []


def add_key(
    http: HttpClient,
    *,
    public_key: str | None = None,
    private_key: str | None = None,
) -> str:
    """
    Upload a public or private key for the logged-in user.

    Exactly one of public_key or private_key is expected.

    Returns:
        The key id assigned by the service.
    """
    data = {}
    if public_key is not None:
        data["public_key"] = public_key
    if private_key is not None:
        data["private_key"] = private_key

    response = http.request("POST", "/key/add.json", data=data)
    return response["kid"]


def revoke_key(http: HttpClient, kid: str) -> bool:
    """Delete a key of the logged-in user."""
    http.request("POST", "/key/revoke.json", data={"kid": kid})
    return True
