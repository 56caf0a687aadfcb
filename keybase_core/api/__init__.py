"""
Keybase API client layer.

Provides HTTP communication with the Keybase API.
"""

from keybase_core.api.http_client import HttpClient, KeybaseStatus, sanitize_for_log

__all__ = ["HttpClient", "KeybaseStatus", "sanitize_for_log"]
