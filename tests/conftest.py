import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from dockerdash.core.config import Settings
from dockerdash.main import create_app


@pytest.fixture
def daemon():
    """Stand-in for the daemon adapter: every call is an AsyncMock."""
    fake = AsyncMock()
    fake.socket_path = "/var/run/docker.sock"
    fake.connected = True
    fake.list_containers.return_value = []
    fake.list_images.return_value = []
    fake.list_volumes.return_value = []
    fake.inspect_container.return_value = {}
    fake.inspect_image.return_value = {}
    fake.version.return_value = {"Version": "27.0.3", "ApiVersion": "1.46", "Os": "linux", "Arch": "amd64"}
    return fake


@pytest.fixture
def settings():
    return Settings(DOCKER_SOCKET_PATH="/var/run/docker.sock", STATS_TIMEOUT=1.0)


@pytest.fixture
def client(daemon, settings):
    app = create_app(settings=settings, daemon=daemon)
    return TestClient(app)
