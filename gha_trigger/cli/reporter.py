from __future__ import annotations

import sys
from enum import IntEnum
from typing import Optional, TextIO

from gha_trigger.domain.errors import AuthenticationError, ConfigurationMissingError
from gha_trigger.domain.models import OutcomeStatus, ProcessOutcome


class ExitCode(IntEnum):
    OK = 0
    EXTERNAL_FAILURE = 1
    CONFIGURATION = 2
    ACCESS_DENIED = 3
    LAUNCH_FAILED = 4
    TIMED_OUT = 124


class Reporter:
    """
    Turns the final outcome into console text + an exit code.
    Never prints the fingerprint or the access code.
    """

    def __init__(self, out: Optional[TextIO] = None, timeout_seconds: float = 30.0):
        self.out = out or sys.stdout
        self.timeout_seconds = timeout_seconds

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    def report(self, outcome: ProcessOutcome) -> int:
        if outcome.status is OutcomeStatus.LAUNCH_FAILED:
            self._print(f"An error occurred while triggering the GitHub Action: {outcome.stderr}")
            return ExitCode.LAUNCH_FAILED

        if outcome.status is OutcomeStatus.TIMED_OUT:
            self._print(
                f"GitHub Action did not complete within the expected timeframe ({self.timeout_seconds:g}s). "
                "The process was terminated."
            )
            return ExitCode.TIMED_OUT

        self._print(f"GitHub Action Output:\n{outcome.stdout}")

        if outcome.status is OutcomeStatus.NON_ZERO_EXIT:
            self._print(f"Error when triggering GitHub Action (exit code {outcome.exit_code}):\n{outcome.stderr}")
            return ExitCode.EXTERNAL_FAILURE

        self._print("GitHub Action successfully triggered.")
        return ExitCode.OK

    def report_error(self, exc: Exception) -> int:
        if isinstance(exc, AuthenticationError):
            self._print("Invalid access code. Access denied.")
            return ExitCode.ACCESS_DENIED

        if isinstance(exc, (ConfigurationMissingError, OSError, ValueError)):
            self._print(f"Configuration error: {exc}")
            return ExitCode.CONFIGURATION

        self._print(f"An error occurred: {exc}")
        return ExitCode.EXTERNAL_FAILURE
