from typing import Any
from unittest.mock import Mock

import pytest


@pytest.fixture
def mock_http() -> Mock:
    return Mock()


def make_success_response(data: dict[str, Any]) -> dict[str, Any]:
    return {"status": {"code": 0, "name": "OK"}, **data}
