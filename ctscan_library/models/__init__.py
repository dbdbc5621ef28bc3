"""Models for ctscan library."""

from .api_config import ExternalApiConfig
from .api_config import is_api_configured
from .base import CamelCaseModel
from .profiles import UserProfile
from .profiles import UserRole
from .scans import STAGE_LABELS
from .scans import CTScan
from .scans import PatientId
from .scans import ScanId
from .scans import TumorDetectionResult
from .scans import TumorStage

__all__ = [
    "CamelCaseModel",
    "CTScan",
    "ExternalApiConfig",
    "PatientId",
    "STAGE_LABELS",
    "ScanId",
    "TumorDetectionResult",
    "TumorStage",
    "UserProfile",
    "UserRole",
    "is_api_configured",
]
