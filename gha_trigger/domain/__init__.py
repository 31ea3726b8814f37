from .errors import (
    AnalysisUnavailableError,
    AuthenticationError,
    ConfigurationMissingError,
    TriggerError,
)
from .models import AnalysisMode, AnalysisResult, InvocationSpec, OutcomeStatus, ProcessOutcome

__all__ = [
    "AnalysisMode",
    "AnalysisResult",
    "InvocationSpec",
    "OutcomeStatus",
    "ProcessOutcome",
    "TriggerError",
    "ConfigurationMissingError",
    "AuthenticationError",
    "AnalysisUnavailableError",
]
