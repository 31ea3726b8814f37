from __future__ import annotations

import io
import subprocess
import sys
import time

import pytest

from gha_trigger.domain.models import InvocationSpec, OutcomeStatus
from gha_trigger.services.process_dispatcher import ProcessDispatcher, WorkflowCommand, describe_argv


def _py(code: str) -> list[str]:
    return [sys.executable, "-c", code]


def make_dispatcher(timeout_seconds: float = 10.0) -> ProcessDispatcher:
    return ProcessDispatcher(command=WorkflowCommand(workflow="wf.yml"), timeout_seconds=timeout_seconds)


# -----------------------------
# Command building
# -----------------------------
def test_build_argv_full_spec():
    cmd = WorkflowCommand(workflow="simple-log-analysis-test.yml")
    spec = InvocationSpec(access_code="abc123", issue_title='Pod \\"web\\" OOM', log_analysis="a\\nb")

    assert cmd.build_argv(spec) == [
        "gh", "workflow", "run", "simple-log-analysis-test.yml",
        "-f", "access_code=abc123",
        "-f", 'issue_title=Pod \\"web\\" OOM',
        "-f", "log_analysis=a\\nb",
    ]


def test_build_argv_omits_missing_fields_and_adds_ref_repo():
    cmd = WorkflowCommand(workflow="wf.yml", ref="main", repo="octo/repo")
    argv = cmd.build_argv(InvocationSpec(access_code="abc123"))

    assert argv == ["gh", "workflow", "run", "wf.yml", "--ref", "main", "--repo", "octo/repo", "-f", "access_code=abc123"]


def test_value_with_shell_metacharacters_stays_one_argument():
    cmd = WorkflowCommand(workflow="wf.yml")
    argv = cmd.build_argv(InvocationSpec(access_code="x", issue_title="t; rm -rf / && echo $(id)", log_analysis="b"))
    assert "issue_title=t; rm -rf / && echo $(id)" in argv


def test_describe_argv_masks_access_code():
    line = describe_argv(["gh", "workflow", "run", "wf.yml", "-f", "access_code=s3cret", "-f", "issue_title=a b"])
    assert "s3cret" not in line
    assert "access_code=***" in line
    assert "\n" not in line


# -----------------------------
# Execution
# -----------------------------
def test_success_captures_stdout_and_stderr():
    outcome = make_dispatcher().run(_py("import sys; print('queued'); print('note', file=sys.stderr)"))

    assert outcome.status is OutcomeStatus.SUCCESS
    assert outcome.ok
    assert outcome.exit_code == 0
    assert outcome.stdout.strip() == "queued"
    assert outcome.stderr.strip() == "note"


def test_nonzero_exit_reports_code_and_stderr():
    outcome = make_dispatcher().run(_py("import sys; sys.stderr.write('boom'); sys.exit(2)"))

    assert outcome.status is OutcomeStatus.NON_ZERO_EXIT
    assert outcome.exit_code == 2
    assert outcome.stderr == "boom"


def test_deadline_kills_process_and_reports_timeout():
    dispatcher = make_dispatcher(timeout_seconds=0.5)
    started = time.monotonic()

    outcome = dispatcher.run(_py("import sys, time; print('partial', flush=True); time.sleep(30)"))

    assert outcome.status is OutcomeStatus.TIMED_OUT
    assert outcome.exit_code is None
    assert outcome.stdout == ""          # partial output is discarded
    assert time.monotonic() - started < 10


def test_large_output_on_both_pipes_does_not_deadlock():
    # Well past the OS pipe buffer on both streams before the child can exit
    code = (
        "import sys\n"
        "chunk = 'x' * 65536\n"
        "for _ in range(32):\n"
        "    sys.stdout.write(chunk)\n"
        "    sys.stderr.write(chunk)\n"
    )
    outcome = make_dispatcher(timeout_seconds=20).run(_py(code))

    assert outcome.status is OutcomeStatus.SUCCESS
    assert len(outcome.stdout) == 32 * 65536
    assert len(outcome.stderr) == 32 * 65536


def test_missing_executable_is_launch_failed():
    outcome = make_dispatcher().run(["definitely-not-a-real-command-4f2a9c"])

    assert outcome.status is OutcomeStatus.LAUNCH_FAILED
    assert outcome.exit_code is None
    assert "definitely-not-a-real-command-4f2a9c" in outcome.stderr


def test_stdin_is_not_attached():
    outcome = make_dispatcher().run(_py("import sys; print(repr(sys.stdin.read()))"))

    assert outcome.status is OutcomeStatus.SUCCESS
    assert outcome.stdout.strip() == "''"


def test_dispatch_passes_each_value_as_single_argv_element():
    calls = []

    def recording_popen(argv, **kwargs):
        calls.append((argv, kwargs))
        return subprocess.Popen(_py("print('ok')"), **kwargs)

    dispatcher = ProcessDispatcher(command=WorkflowCommand(workflow="wf.yml"), timeout_seconds=10, popen=recording_popen)
    outcome = dispatcher.dispatch(InvocationSpec(access_code="abc", issue_title="t i t", log_analysis="l\\nl"))

    assert outcome.status is OutcomeStatus.SUCCESS
    assert len(calls) == 1
    argv, kwargs = calls[0]
    assert argv[-1] == "log_analysis=l\\nl"
    assert "issue_title=t i t" in argv
    assert kwargs["shell"] is False


@pytest.mark.parametrize("exit_code", [1, 3, 127])
def test_any_nonzero_code_is_failure(exit_code):
    outcome = make_dispatcher().run(_py(f"import sys; sys.exit({exit_code})"))
    assert outcome.status is OutcomeStatus.NON_ZERO_EXIT
    assert outcome.exit_code == exit_code


def test_argv_with_null_byte_is_launch_failed():
    outcome = make_dispatcher().run(_py("print('never')") + ["title\x00x"])

    assert outcome.status is OutcomeStatus.LAUNCH_FAILED
    assert outcome.exit_code is None
    assert "null" in outcome.stderr


class ExitedBeforeKillProcess:
    """Child that outlives the deadline wait but is gone when kill() is sent."""

    pid = 4242

    def __init__(self):
        self.stdout = io.BytesIO(b"")
        self.stderr = io.BytesIO(b"")
        self.kill_calls = 0

    def wait(self, timeout=None):
        raise subprocess.TimeoutExpired(cmd="gh", timeout=timeout)

    def kill(self):
        self.kill_calls += 1
        raise ProcessLookupError(3, "No such process")


def test_kill_race_with_exited_process_is_swallowed():
    proc = ExitedBeforeKillProcess()
    dispatcher = ProcessDispatcher(
        command=WorkflowCommand(workflow="wf.yml"),
        timeout_seconds=0.1,
        popen=lambda argv, **kwargs: proc,
    )

    outcome = dispatcher.dispatch(InvocationSpec(access_code="abc"))

    assert outcome.status is OutcomeStatus.TIMED_OUT
    assert outcome.exit_code is None
    assert proc.kill_calls == 1
