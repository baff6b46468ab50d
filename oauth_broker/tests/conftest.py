"""
Pytest configuration for oauth_broker. Handlers get an explicit BrokerConfig via dependency override,
so tests never depend on the process environment.
"""
import pytest
from fastapi.testclient import TestClient

from oauth_broker.config import BrokerConfig, Project, get_config
from oauth_broker.main import app

CREATE_ORIGIN = "http://localhost:5173"
PROMPTS_ORIGIN = "http://localhost:5174"


def make_config(**overrides) -> BrokerConfig:
    values = dict(
        client_id="test-client-id",
        client_secret="test-client-secret",
        production=False,
        base_url="http://localhost:3000",
        default_project="create",
        projects={
            "create": Project(id="create", frontend_origin=CREATE_ORIGIN),
            "prompts": Project(id="prompts", frontend_origin=PROMPTS_ORIGIN),
        },
    )
    values.update(overrides)
    return BrokerConfig(**values)


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def client(config):
    app.dependency_overrides[get_config] = lambda: config
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def config_factory():
    return make_config
