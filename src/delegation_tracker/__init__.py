"""Track delegated subagent work while an orchestration run streams events."""

__version__ = "0.1.0"

from .tracking import DelegatedTask, DelegationTracker, RunStatistics, extract_text

__all__ = [
    "DelegatedTask",
    "DelegationTracker",
    "RunStatistics",
    "__version__",
    "extract_text",
]
