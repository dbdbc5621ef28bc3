"""Cache and mutation orchestration for the scan dashboard."""

from .messages import classify_analyze_error
from .orchestrator import ScanOrchestrator
from .results import MutationKind
from .results import MutationResult
from .results import MutationStatus
from .results import QueryResult

__all__ = [
    "MutationKind",
    "MutationResult",
    "MutationStatus",
    "QueryResult",
    "ScanOrchestrator",
    "classify_analyze_error",
]
