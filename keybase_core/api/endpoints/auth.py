"""Authentication-related API endpoints."""

from typing import Any

from keybase_core.api.http_client import HttpClient


def get_salt_and_login_session(http: HttpClient, email_or_username: str) -> tuple[str, str]:
    """
    Get the passphrase salt and a one-time login session.

    Args:
        http: Configured HTTP client.
        email_or_username: Account email or username.

    Returns:
        Tuple of (hex-encoded salt, base64-encoded login session).
    """
    response = http.request(
        "GET",
        "/getsalt.json",
        params={"email_or_username": email_or_username},
        authenticated=False,
    )
    return response["salt"], response["login_session"]


def login(
    http: HttpClient,
    email_or_username: str,
    hmac_pwh: str,
    login_session: str,
) -> dict[str, Any]:
    """
    Complete the login handshake.

    Args:
        http: Configured HTTP client.
        email_or_username: Account email or username.
        hmac_pwh: Hex-encoded authenticator derived from the passphrase.
        login_session: Login session returned by getsalt.

    Returns:
        Login response with session, csrf_token and the `me` user record.
    """
    return http.request(
        "POST",
        "/login.json",
        data={
            "email_or_username": email_or_username,
            "hmac_pwh": hmac_pwh,
            "login_session": login_session,
        },
        authenticated=False,
    )


def kill_all_sessions(http: HttpClient) -> bool:
    """Terminate every session of the logged-in user."""
    http.request("POST", "/session/killall.json")
    return True
