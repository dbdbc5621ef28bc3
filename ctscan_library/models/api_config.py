"""External AI service configuration model."""

from pydantic import Field

from .base import CamelCaseModel


class ExternalApiConfig(CamelCaseModel):
    """Endpoint and key of the external tumor-detection service.

    Singleton on the backend, readable and writable by admins only.
    """

    endpoint_url: str = Field(description="URL the backend posts scans to for analysis")
    api_key: str = Field(description="Key sent to the external service")

    @property
    def is_configured(self) -> bool:
        """Both fields set, so an analysis attempt is worth making."""
        return bool(self.endpoint_url.strip()) and bool(self.api_key.strip())


def is_api_configured(config: ExternalApiConfig | None) -> bool:
    """Client-side gate for the Analyze action.

    Args:
        config: Cached config, None when unset or unreadable

    Returns:
        True only when a config exists with both fields non-empty
    """
    return config is not None and config.is_configured
