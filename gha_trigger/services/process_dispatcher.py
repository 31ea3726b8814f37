from __future__ import annotations

import logging
import shlex
import subprocess
import threading
import time
from dataclasses import dataclass
from typing import IO, Callable, List

from gha_trigger.domain.models import InvocationSpec, OutcomeStatus, ProcessOutcome

logger = logging.getLogger(__name__)

GH_COMMAND = "gh"
REDACTED = "***"
DRAIN_GRACE_SECONDS = 1.0


@dataclass(frozen=True)
class WorkflowCommand:
    """
    Builds the `gh workflow run` argv. Command and flag names are fixed;
    only the already-escaped InvocationSpec values come from input.
    """
    workflow: str
    ref: str = ""
    repo: str = ""
    command: str = GH_COMMAND

    def build_argv(self, spec: InvocationSpec) -> List[str]:
        argv = [self.command, "workflow", "run", self.workflow]
        if self.ref:
            argv += ["--ref", self.ref]
        if self.repo:
            argv += ["--repo", self.repo]

        argv += ["-f", f"access_code={spec.access_code}"]
        if spec.issue_title is not None:
            argv += ["-f", f"issue_title={spec.issue_title}"]
        if spec.log_analysis is not None:
            argv += ["-f", f"log_analysis={spec.log_analysis}"]
        return argv


def describe_argv(argv: List[str]) -> str:
    """Single-line rendering for logs, with the access code masked."""
    shown = [f"access_code={REDACTED}" if a.startswith("access_code=") else a for a in argv]
    return shlex.join(shown)


def _drain(stream: IO[bytes], sink: List[bytes]) -> None:
    with stream:
        for chunk in iter(lambda: stream.read(8192), b""):
            sink.append(chunk)


def _decode(chunks: List[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace")


class ProcessDispatcher:
    """
    Runs one external command with both output pipes drained concurrently
    and a single deadline. Never retries.
    """

    def __init__(
        self,
        command: WorkflowCommand,
        timeout_seconds: float = 30.0,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ):
        self.command = command
        self.timeout_seconds = timeout_seconds
        self._popen = popen

    def dispatch(self, spec: InvocationSpec) -> ProcessOutcome:
        argv = self.command.build_argv(spec)
        logger.info("Running: %s", describe_argv(argv))
        return self.run(argv)

    def run(self, argv: List[str]) -> ProcessOutcome:
        started = time.monotonic()

        def elapsed_ms() -> int:
            return int((time.monotonic() - started) * 1000)

        # Idle -> Started
        try:
            proc = self._popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                shell=False,
            )
        except (OSError, ValueError) as e:
            # ValueError: argv rejected before exec, e.g. an embedded null byte
            logger.error("Failed to start %s: %s", argv[0], e)
            reason = getattr(e, "strerror", None) or e
            return ProcessOutcome(
                status=OutcomeStatus.LAUNCH_FAILED,
                exit_code=None,
                stdout="",
                stderr=f"Failed to start {argv[0]}: {reason}",
                duration_ms=elapsed_ms(),
            )

        # Started -> Draining: one reader per pipe, running while we wait
        out_chunks: List[bytes] = []
        err_chunks: List[bytes] = []
        drains = [
            threading.Thread(target=_drain, args=(proc.stdout, out_chunks), name="drain-stdout", daemon=True),
            threading.Thread(target=_drain, args=(proc.stderr, err_chunks), name="drain-stderr", daemon=True),
        ]
        for t in drains:
            t.start()

        try:
            exit_code = proc.wait(timeout=self.timeout_seconds)
        except subprocess.TimeoutExpired:
            # Draining -> TimedOut
            logger.warning("Process %s exceeded %ss deadline; killing it.", proc.pid, self.timeout_seconds)
            self._kill(proc)
            return ProcessOutcome(
                status=OutcomeStatus.TIMED_OUT,
                exit_code=None,
                stdout="",
                stderr="",
                duration_ms=elapsed_ms(),
            )

        # Draining -> Completed. Pipes close at exit unless a grandchild keeps them open.
        for t in drains:
            t.join(timeout=max(self.timeout_seconds - (time.monotonic() - started), DRAIN_GRACE_SECONDS))

        stdout = _decode(out_chunks)
        stderr = _decode(err_chunks)
        status = OutcomeStatus.SUCCESS if exit_code == 0 else OutcomeStatus.NON_ZERO_EXIT
        logger.debug("Process %s exited with %s after %sms", proc.pid, exit_code, elapsed_ms())

        return ProcessOutcome(
            status=status,
            exit_code=exit_code,
            stdout=stdout,
            stderr=stderr,
            duration_ms=elapsed_ms(),
        )

    @staticmethod
    def _kill(proc: subprocess.Popen) -> None:
        try:
            proc.kill()
        except OSError as e:
            # Exited between the deadline and the kill
            logger.debug("Kill of %s failed: %s", proc.pid, e)
            return
        try:
            proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            logger.warning("Process %s did not exit after kill.", proc.pid)
