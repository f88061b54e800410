"""Pytest configuration and fixtures."""

import pytest

from shoutit.config import Configuration


@pytest.fixture
def credentials():
    """Valid provider credentials."""
    return Configuration(app_id="app-123", rest_api_key="key-abc")


@pytest.fixture
def write_config(tmp_path):
    """Write a config file under a fake home directory and return its path."""

    def _write(text: str):
        path = tmp_path / ".cogciprocate" / "shoutit.toml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return path

    return _write
