"""Pytest fixtures: testing config, fake-engine pool and an app wired to them."""

import pytest
from fastapi.testclient import TestClient

from mycoffee.app_factory import create_application
from mycoffee.config_manager import ConfigManager
from mycoffee.database.mysql_connection import DatabasePool
from mycoffee.services.procedure_gateway import ProcedureGateway
from tests.fakes import CoffeeProcedures, FakeDatabase


@pytest.fixture
def make_config(monkeypatch, tmp_path):
    """Build a ConfigManager from a clean environment plus overrides."""

    def _make(**env):
        for name in ("ENVIRONMENT", "NODE_ENV", "DEBUG", "DB_NAME", "DB_USER", "LOG_FILE"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("ENVIRONMENT", "testing")
        monkeypatch.setenv("DB_QUERY_TIMEOUT", "0.5")
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        return ConfigManager(env_file=str(tmp_path / "missing.env"))

    return _make


@pytest.fixture
def config(make_config):
    return make_config()


@pytest.fixture
def coffee():
    return CoffeeProcedures()


@pytest.fixture
def fake_db(coffee):
    return FakeDatabase(coffee.handlers())


@pytest.fixture
def pool(config, fake_db):
    return DatabasePool(config.database, engine_factory=fake_db.engine_factory)


@pytest.fixture
def gateway(pool):
    return ProcedureGateway(pool)


@pytest.fixture
def app(config, pool):
    return create_application(config=config, pool=pool)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
