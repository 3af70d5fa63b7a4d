"""
Shared pytest fixtures.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

from landlord.providers.base import TenantProvider
from landlord.tenancy.landlord import DatabaseOptions
from landlord.tenancy.tenant import Tenant


TENANTS = {
    "_default_.tenant.json": {
        "features": {"beta": True, "dashboard": False},
        "theme": {"color": "blue", "logo": "default.png"},
    },
    "127.0.0.1.tenant.json": {
        "features": {"dashboard": True},
        "location": "local loopback",
        "environment": {"database": {"client": "sqlite3", "filename": ":memory:"}},
    },
    "localhost.tenant.json": {
        "features": {"dashboard": True},
        "theme": {"color": "green"},
        "environment": {"database": {"client": "sqlite3", "filename": "localhost.db"}},
    },
    "Acme.Tenant.json": {
        "theme": {"color": "red"},
    },
}

TENANTS_OVERRIDES = {
    "127.0.0.1.tenant.json": {
        "location": "overridden by the second provider",
    },
}

TENANTS_YAML = """\
theme:
  color: purple
environment:
  database:
    client: postgres
    host: db.internal
"""


def _write_tenants(directory: Path, tenants: Dict[str, Any]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for file_name, config in tenants.items():
        (directory / file_name).write_text(json.dumps(config), encoding="utf-8")
    return directory


@pytest.fixture
def tenant_dir(tmp_path) -> Path:
    """Directory with ``_default_``, ``127.0.0.1``, ``localhost`` and ``acme`` tenants."""
    return _write_tenants(tmp_path / "tenants", TENANTS)


@pytest.fixture
def override_dir(tmp_path) -> Path:
    """Second tenant directory overriding ``127.0.0.1``."""
    return _write_tenants(tmp_path / "tenants2", TENANTS_OVERRIDES)


@pytest.fixture
def yaml_tenant_dir(tmp_path) -> Path:
    directory = tmp_path / "yaml_tenants"
    directory.mkdir()
    (directory / "globex.tenant.yaml").write_text(TENANTS_YAML, encoding="utf-8")
    return directory


class StaticProvider(TenantProvider):
    """Provider returning fresh tenants built from fixed data."""

    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data
        self.calls = 0

    def load_tenants(self, log=None):
        self.calls += 1
        return [Tenant(item["name"], item["config"]) for item in self.data]


@pytest.fixture
def static_provider():
    return StaticProvider


class MockDBClient:
    """Database client double recording its lifecycle."""

    def __init__(self, config=None):
        self.config = config
        self.closed = False

    def close(self):
        self.closed = True


@pytest.fixture
def log_messages():
    """List collecting every message sent to the returned sink."""
    messages: List[str] = []
    return messages


@pytest.fixture
def log(log_messages):
    return log_messages.append


@pytest.fixture
def db_clients() -> List[MockDBClient]:
    return []


@pytest.fixture
def db_options(db_clients):
    """Complete database options creating ``MockDBClient`` instances."""
    def factory(config):
        client = MockDBClient(config)
        db_clients.append(client)
        return client

    def finalizer(client):
        client.close()

    return DatabaseOptions(factory=factory, finalizer=finalizer, config_path="environment.database")
