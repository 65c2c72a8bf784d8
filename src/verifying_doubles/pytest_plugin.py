"""pytest integration: verify and reset every double after each test."""

import pytest

from .config import configure
from .lifecycle import Space, space


def pytest_addoption(parser):
    parser.addini(
        "verify_constant_names",
        type="bool",
        default=False,
        help="Fail when a verifying double names a type that is not defined.",
    )


def pytest_configure(config):
    configure(verify_constant_names=config.getini("verify_constant_names"))


def finish_test(registry: Space) -> None:
    """Verify what the test declared, then undo all of it."""
    try:
        registry.verify_all()
    finally:
        registry.reset_all()


@pytest.fixture(autouse=True)
def verifying_doubles_teardown():
    yield
    finish_test(space)


@pytest.fixture
def doubles_space() -> Space:
    return space
