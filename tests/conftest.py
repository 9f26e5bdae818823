"""Shared pytest fixtures."""

import pytest
from fastapi.testclient import TestClient

from services.config_manager import CONFIG_DIR_ENV, ConfigManager


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config manager at a throwaway directory."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv(CONFIG_DIR_ENV, str(config_dir))
    ConfigManager.reset_instance()
    yield config_dir
    ConfigManager.reset_instance()


@pytest.fixture
def client():
    """Test client with the application lifespan running."""
    from main import app

    with TestClient(app) as test_client:
        yield test_client
