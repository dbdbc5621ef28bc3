"""User-facing mutation messages.

The backend reports analysis misconfiguration only through message text,
so the substrings below are a compatibility contract with its current
wording. Keep every such string in this module.
"""

ENDPOINT_NOT_CONFIGURED = "API endpoint not configured"
API_KEY_NOT_CONFIGURED = "API key not configured"

ENDPOINT_NOT_CONFIGURED_GUIDANCE = "API endpoint not configured. Please configure the API settings first."
API_KEY_NOT_CONFIGURED_GUIDANCE = "API key not configured. Please configure the API settings first."

PROFILE_SAVED = "Profile saved successfully"
SCAN_UPLOADED = "CT scan uploaded successfully"
ANALYSIS_COMPLETED = "Analysis completed successfully"
API_CONFIG_SAVED = "API configuration saved successfully"


def save_profile_failed(message: str) -> str:
    return f"Failed to save profile: {message}"


def upload_scan_failed(message: str) -> str:
    return f"Failed to upload scan: {message}"


def configure_api_failed(message: str) -> str:
    return f"Failed to save configuration: {message}"


def classify_analyze_error(message: str) -> str:
    """Translate an analyzeScan rejection into user guidance.

    Args:
        message: Raw rejection text from the backend

    Returns:
        Canned guidance for a missing endpoint or key, otherwise
        "Analysis failed: <message>"

    Example:
        >>> classify_analyze_error("boom")
        'Analysis failed: boom'
    """
    if ENDPOINT_NOT_CONFIGURED in message:
        return ENDPOINT_NOT_CONFIGURED_GUIDANCE
    if API_KEY_NOT_CONFIGURED in message:
        return API_KEY_NOT_CONFIGURED_GUIDANCE
    return f"Analysis failed: {message}"
