######## models.py
########

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    NON_ZERO_EXIT = "non_zero_exit"
    TIMED_OUT = "timed_out"
    LAUNCH_FAILED = "launch_failed"


class AnalysisMode(str, Enum):
    GENERATE = "generate"       # configured provider, static fallback on failure
    STATIC = "static"           # fixed default title/body
    OMIT = "omit"               # access_code only


@dataclass(frozen=True)
class AnalysisResult:
    title: str
    body: str

    def is_complete(self) -> bool:
        return bool((self.title or "").strip()) and bool((self.body or "").strip())


@dataclass(frozen=True)
class InvocationSpec:
    """Escaped workflow inputs. None means the input is not sent."""
    access_code: str
    issue_title: Optional[str] = None
    log_analysis: Optional[str] = None


@dataclass(frozen=True)
class ProcessOutcome:
    status: OutcomeStatus
    exit_code: Optional[int]    # None when the process never started or was killed
    stdout: str
    stderr: str
    duration_ms: int

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS
