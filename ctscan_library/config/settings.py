"""Settings model for the scanboard client.

Contract:
- Inputs: Environment variables, YAML files
- Outputs: Validated settings objects
- Side Effects: None (read-only)
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class ClientSettings(BaseSettings):
    """Configuration for the scanboard client.

    Attributes:
        backend_url: Base URL of the scan-analysis backend
        identity: Bearer token issued by the identity provider (empty = anonymous)
        request_timeout_s: Per-request transport timeout in seconds
        log_level: Logging level (default: info)

    Example:
        >>> settings = ClientSettings()
        >>> assert settings.backend_url == "http://127.0.0.1:4943"
    """

    model_config = SettingsConfigDict(
        env_prefix="SCANBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    backend_url: str = "http://127.0.0.1:4943"
    identity: str = ""
    request_timeout_s: float = 30.0
    log_level: str = "info"

    @field_validator("backend_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so RPC paths can be appended directly."""
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.lower()
