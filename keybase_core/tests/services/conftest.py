from unittest.mock import Mock

import pytest

from keybase_core.api.http_client import HttpClient
from keybase_core.config import KeybaseConfig
from keybase_core.services.auth_service import AuthSession, SessionState


@pytest.fixture
def mock_http() -> Mock:
    return Mock(spec=HttpClient)


@pytest.fixture
def auth_session(mock_http: Mock) -> AuthSession:
    """Anonymous AuthSession with a mocked HTTP client."""
    return AuthSession(mock_http, KeybaseConfig())


@pytest.fixture
def logged_in_session(auth_session: AuthSession) -> AuthSession:
    """AuthSession already in the authenticated state."""
    auth_session._state = SessionState.AUTHENTICATED
    return auth_session
