"""Pytest fixtures for integration tests against the simulation environment"""

import os

import pytest


def validate_live_environment():
    """Validate required environment variables are set for live tests."""
    required_vars = [
        "SAXO_APP_KEY",
        "SAXO_APP_SECRET",
        "SAXO_APP_REDIRECT_URI",
        "SAXO_ACCESS_TOKEN",
    ]

    missing_vars = [var for var in required_vars if not os.getenv(var)]
    if missing_vars:
        raise ValueError(
            f"Missing required environment variables: {missing_vars}"
        )


@pytest.fixture
def live_credentials():
    """Token credentials for the simulation environment"""
    from saxopoint import TokenCredentials

    try:
        validate_live_environment()
    except ValueError as e:
        pytest.skip(str(e))

    return TokenCredentials(os.environ["SAXO_ACCESS_TOKEN"])


@pytest.fixture
def live_config():
    from saxopoint import AppConfig

    return AppConfig.from_env()
