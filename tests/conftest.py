"""Pytest fixtures shared by the store, renderer and HTTP tests."""

import pytest
from fastapi.testclient import TestClient

from feed_publisher import create_app, models
from feed_publisher.config import Settings

TOKEN = "test-broadcast-token"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        broadcast_token=TOKEN,
        database_url=f"sqlite:///{tmp_path / 'feed.db'}",
    )


@pytest.fixture
def database(settings):
    database = models.connect_database(settings.database_url)
    models.init_schema()
    yield database
    database.close()


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TOKEN}"}
