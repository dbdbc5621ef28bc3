"""
Unit tests for configuration loading.

Tests config file creation, loading from YAML, and environment variable overrides.
"""

from pathlib import Path

import pytest

from ctscan_library.config import loader
from ctscan_library.config.settings import ClientSettings


@pytest.mark.unit
class TestConfigLoader:
    """Test configuration loading functions."""

    def test_get_config_path_returns_scanboard_yaml(self, mock_storage_env: Path) -> None:
        config_path = loader.get_config_path()

        assert config_path.name == "scanboard.yaml"
        assert config_path.parent == mock_storage_env.resolve() / "config"

    def test_create_default_config_has_yaml_content(self, mock_storage_env: Path) -> None:
        loader.create_default_config()

        content = loader.get_config_path().read_text()
        assert "backend_url:" in content
        assert "log_level:" in content

    def test_create_default_config_is_idempotent(self, mock_storage_env: Path) -> None:
        """Test create_default_config doesn't overwrite existing config."""
        config_path = loader.get_config_path()
        custom_content = "# Custom config\nbackend_url: http://custom:1\n"
        config_path.write_text(custom_content)

        loader.create_default_config()

        assert config_path.read_text() == custom_content

    def test_load_settings_creates_default_if_missing(self, mock_storage_env: Path) -> None:
        settings = loader.load_settings()

        assert isinstance(settings, ClientSettings)
        assert loader.get_config_path().exists()
        assert settings.backend_url == "http://127.0.0.1:4943"

    def test_load_settings_reads_yaml(self, mock_storage_env: Path) -> None:
        loader.get_config_path().write_text('backend_url: "https://scans.example.org/"\nrequest_timeout_s: 5\n')

        settings = loader.load_settings()

        assert settings.backend_url == "https://scans.example.org"
        assert settings.request_timeout_s == 5.0

    def test_env_overrides_yaml(self, mock_storage_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        loader.get_config_path().write_text('backend_url: "https://yaml.example.org"\nlog_level: "debug"\n')
        monkeypatch.setenv("SCANBOARD_BACKEND_URL", "https://env.example.org")

        settings = loader.load_settings()

        assert settings.backend_url == "https://env.example.org"
        assert settings.log_level == "debug"

    def test_invalid_yaml_falls_back_to_defaults(self, mock_storage_env: Path) -> None:
        loader.get_config_path().write_text("backend_url: [unclosed\n")

        settings = loader.load_settings()

        assert settings.backend_url == "http://127.0.0.1:4943"

    def test_unknown_keys_and_non_mapping_ignored(self, mock_storage_env: Path) -> None:
        config_path = loader.get_config_path()
        config_path.write_text('port: 8420\nidentity: "tok"\n')

        assert loader.load_settings().identity == "tok"

        config_path.write_text("- just\n- a list\n")

        assert loader.load_settings().identity == ""

    def test_explicit_path(self, tmp_path: Path, mock_storage_env: Path) -> None:
        config_path = tmp_path / "custom.yaml"
        config_path.write_text('identity: "token-abc"\n')

        settings = loader.load_settings(config_path)

        assert settings.identity == "token-abc"


@pytest.mark.unit
class TestClientSettings:
    """Test settings normalization."""

    def test_log_level_lowercased(self, mock_storage_env: Path) -> None:
        assert ClientSettings(log_level="DEBUG").log_level == "debug"

    def test_trailing_slash_stripped(self, mock_storage_env: Path) -> None:
        assert ClientSettings(backend_url="http://host:1/").backend_url == "http://host:1"
