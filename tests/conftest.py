"""Test configuration for pytest."""

import logging
import os

import pytest

import sample_types  # noqa: F401  (doubled types must be loaded)
from verifying_doubles.config import reset_settings
from verifying_doubles.lifecycle import space


@pytest.fixture(autouse=True)
def configure_test_logging():
    """Keep library logging quiet during tests."""
    os.environ['VERIFYING_DOUBLES_LOG_LEVEL'] = 'WARNING'
    logging.getLogger("verifying_doubles").setLevel(logging.WARNING)


@pytest.fixture(autouse=True)
def verifying_doubles_teardown():
    """
    Reset, but do not verify, after each test.

    Overrides the plugin fixture of the same name: several tests leave
    expectations unmet on purpose.
    """
    yield
    space.reset_all()
    reset_settings()
