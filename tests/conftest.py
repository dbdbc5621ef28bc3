"""
Shared pytest fixtures for the scanboard test suite.

Provides fixtures for:
- Temporary storage directories
- A recording in-memory remote client
- Sessions wired to that client
"""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from ctscan_library.models import ExternalApiConfig
from ctscan_library.models import UserRole
from ctscan_library.session import ClientSession
from tests.fakes import FakeRemoteClient


@pytest.fixture
def fake_client() -> FakeRemoteClient:
    """Empty backend with a non-admin caller."""
    return FakeRemoteClient()


@pytest.fixture
def admin_client(fake_client: FakeRemoteClient) -> FakeRemoteClient:
    """Backend where the caller is an admin and the external API is configured."""
    fake_client.admin = True
    fake_client.role = UserRole.ADMIN
    fake_client.api_config = ExternalApiConfig(endpoint_url="https://ai.example.org/analyze", api_key="sk-test-123")
    return fake_client


@pytest.fixture
def session(fake_client: FakeRemoteClient) -> ClientSession:
    return ClientSession(identity="test-identity", client=fake_client)


@pytest.fixture
def temp_storage_dir() -> Generator[Path, None, None]:
    """Create temporary storage directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_storage_env(temp_storage_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point SCANBOARD_HOME at a temp directory and clear SCANBOARD_* overrides.

    Returns:
        Path to temporary storage directory
    """
    monkeypatch.setenv("SCANBOARD_HOME", str(temp_storage_dir))
    for var in ("SCANBOARD_CONFIG_DIR", "SCANBOARD_LOG_DIR", "SCANBOARD_BACKEND_URL", "SCANBOARD_IDENTITY"):
        monkeypatch.delenv(var, raising=False)
    return temp_storage_dir
