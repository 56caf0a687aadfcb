"""User-related API endpoints."""

from typing import Any

from keybase_core.api.http_client import HttpClient
from keybase_core.exceptions import NotFoundError


def lookup_user(http: HttpClient, username: str) -> dict[str, Any]:
    """
    Look up a user's public record.

    Args:
        http: Configured HTTP client.
        username: Keybase username.

    Returns:
        Raw user record.

    Raises:
        NotFoundError: If the service has no record for the username.
    """
    response = http.request(
        "GET",
        "/user/lookup.json",
        params={"username": username},
        authenticated=False,
    )
    them = response.get("them")
    if isinstance(them, list):
        them = next((t for t in them if t), None)
    if not them:
        msg = f"User {username} not found"
        raise NotFoundError(msg, endpoint="/user/lookup.json")
    return them
