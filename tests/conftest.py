"""
Shared fixtures: every test gets its own data directory and config copy,
so nothing touches ./data or the module-level CONFIG.
"""

import copy
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from rpm_life.main import create_app
from rpm_life.store.registry import build_repositories
from rpm_life.utils.config import CONFIG


@pytest.fixture
def config(tmp_path):
    cfg = copy.deepcopy(CONFIG)
    cfg["debug_mode"] = False
    cfg["storage"]["backend"] = "json"
    cfg["storage"]["data_dir"] = str(tmp_path / "data")
    cfg["storage"]["database_url"] = f"sqlite:///{tmp_path / 'rpm_life.db'}"
    cfg["storage"]["create_missing"] = True
    cfg["storage"]["lock_timeout"] = 2.0
    return cfg


@pytest.fixture
def data_dir(config):
    return Path(config["storage"]["data_dir"])


@pytest.fixture
def repos(config):
    return build_repositories(config)


@pytest.fixture
def client(config, repos):
    app = create_app(config, repositories=repos)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
