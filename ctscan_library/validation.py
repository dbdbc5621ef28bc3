"""Input validation for profile, upload and API configuration forms.

Values are trimmed before they are validated and sent to the backend.
"""

from dataclasses import dataclass
from dataclasses import field
from urllib.parse import urlparse

from .models import ExternalApiConfig
from .models import UserProfile

ENDPOINT_REQUIRED = "API Endpoint URL is required."
ENDPOINT_INVALID = "Please enter a valid URL (e.g. https://your-api.com/analyze)."
API_KEY_REQUIRED = "API Key is required."


@dataclass
class ValidationResult:
    """Per-field validation errors plus the cleaned value when valid."""

    errors: dict[str, str] = field(default_factory=dict)
    value: object = None

    @property
    def ok(self) -> bool:
        return not self.errors


def _is_valid_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def validate_api_config(endpoint_url: str, api_key: str) -> ValidationResult:
    """Validate the external API form.

    Args:
        endpoint_url: Raw endpoint URL input
        api_key: Raw API key input

    Returns:
        ValidationResult whose value is a trimmed ExternalApiConfig when ok
    """
    endpoint_url = endpoint_url.strip()
    api_key = api_key.strip()
    result = ValidationResult()

    if not endpoint_url:
        result.errors["endpoint_url"] = ENDPOINT_REQUIRED
    elif not _is_valid_url(endpoint_url):
        result.errors["endpoint_url"] = ENDPOINT_INVALID

    if not api_key:
        result.errors["api_key"] = API_KEY_REQUIRED

    if result.ok:
        result.value = ExternalApiConfig(endpoint_url=endpoint_url, api_key=api_key)
    return result


def validate_profile(name: str, department: str, specialization: str) -> ValidationResult:
    """All three profile fields are required."""
    fields = {
        "name": name.strip(),
        "department": department.strip(),
        "specialization": specialization.strip(),
    }
    result = ValidationResult()
    for key, value in fields.items():
        if not value:
            result.errors[key] = f"{key.capitalize()} is required."
    if result.ok:
        result.value = UserProfile(**fields)
    return result


def validate_upload(patient_id: str, scan_blob: bytes) -> ValidationResult:
    """Patient id and a non-empty image are required. Value is (patient_id, blob)."""
    patient_id = patient_id.strip()
    result = ValidationResult()
    if not patient_id:
        result.errors["patient_id"] = "Patient ID is required."
    if not scan_blob:
        result.errors["scan_blob"] = "A CT scan image is required."
    if result.ok:
        result.value = (patient_id, scan_blob)
    return result
