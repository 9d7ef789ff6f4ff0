"""Test configuration."""

import os
from pathlib import Path
from typing import List

import pytest
from pytest import Config

# Must be set before enricher.core.config is imported anywhere
os.environ["TESTING"] = "true"

from enricher.core.logging import configure_logging  # noqa: E402

fixture = pytest.fixture


@fixture(scope="session")
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


pytest_plugins: List[str] = [
    "tests.fixtures.db",
    "tests.fixtures.stubs",
]


def pytest_configure(config: Config) -> None:
    """Configure pytest.

    Args:
        config: Pytest configuration object
    """
    configure_logging(testing=True)
