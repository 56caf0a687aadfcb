"""
Keybase client configuration.
"""

from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class KeybaseConfig:
    """
    Attributes:
        api_url: Base URL for the Keybase API.
        timeout: Request timeout in seconds.
        user_agent: User-Agent header value.
        verify_auth_tokens: Check auth tokens returned by post_auth against
            the digest of the submitted armored signature.
    """

    api_url: str = "https://keybase.io/_/api/1.0"
    timeout: float = 30.0
    user_agent: str = "keybase-core-python/0.1"
    verify_auth_tokens: bool = True

    def __post_init__(self) -> None:
        if not self.api_url:
            msg = "api_url must not be empty"
            raise ValueError(msg)
        if self.timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)
