"""Signature-related API endpoints."""

from keybase_core.api.http_client import HttpClient


def post_auth(http: HttpClient, email_or_username: str, sig: str) -> str:
    """
    Post a self-signed authentication certificate.

    Args:
        http: Configured HTTP client.
        email_or_username: Account the certificate was signed for.
        sig: The whole armored certificate.

    Returns:
        The auth token issued after the service verified the signature.
    """
    response = http.request(
        "POST",
        "/sig/post_auth.json",
        data={"email_or_username": email_or_username, "sig": sig},
    )
    return response["auth_token"]
