import os

import pytest


def pytest_collection_modifyitems(config: pytest.Config, items: list) -> None:
    missing = not (os.getenv("KEYBASE_TEST_USERNAME") and os.getenv("KEYBASE_TEST_PASSPHRASE"))
    if not missing:
        return
    mark_expr = getattr(config.option, "markexpr", "")
    if "integration" in mark_expr:
        return
    skip = pytest.mark.skip(reason="KEYBASE_TEST_USERNAME / KEYBASE_TEST_PASSPHRASE not set")
    for item in items:
        if item.get_closest_marker("integration"):
            item.add_marker(skip)


@pytest.fixture(scope="session")
def keybase_credentials() -> tuple[str, str]:
    username = os.getenv("KEYBASE_TEST_USERNAME")
    passphrase = os.getenv("KEYBASE_TEST_PASSPHRASE")
    if not username or not passphrase:
        pytest.fail(
            "KEYBASE_TEST_USERNAME and KEYBASE_TEST_PASSPHRASE must be set to run integration tests."
        )
    return username, passphrase
