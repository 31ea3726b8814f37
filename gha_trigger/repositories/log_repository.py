from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

SAMPLE_POD_LOG = """
2023-11-19T12:30:00.000Z [info]  Application starting...
2023-11-19T12:30:15.000Z [info]  Database connection established.
2023-11-19T12:32:00.000Z [warn]  Database query took longer than 500ms, potential performance bottleneck.
2023-11-19T12:33:00.000Z [error] Failed to connect to external service: Connection refused.
2023-11-19T12:35:00.000Z [info]  External service now reachable, resuming normal operation.
2023-11-19T12:40:00.000Z [info]  Processing batch job #12345.
2023-11-19T12:45:00.000Z [warn]  Memory usage is at 85%, monitor for potential issues.
2023-11-19T12:50:00.000Z [error] Out of memory error during batch job processing. Job #12345 was terminated.
2023-11-19T12:55:00.000Z [info]  Application restarted after OutOfMemoryError, health checks passed.
2023-11-19T13:00:00.000Z [info]  New request received at /api/v1/data endpoint.
2023-11-19T13:05:00.000Z [warn]  Retrying operation after temporary network issue.
"""


def _newest_log_in(base: Path) -> Optional[Path]:
    candidates = [p for p in base.glob("*.log") if p.is_file()]
    if not candidates:
        return None
    return max(candidates, key=lambda p: p.stat().st_mtime)


@dataclass
class LogRepository:
    """
    Repository pattern: encapsulates where the log text to analyze comes from.
    A file is read as-is, a directory yields its newest *.log, None yields the bundled sample.
    """
    log_path: Optional[Path] = None

    def find_log_file(self) -> Optional[Path]:
        if self.log_path is None:
            return None
        if not self.log_path.exists():
            raise FileNotFoundError(f"Log path not found: {self.log_path}")
        if self.log_path.is_dir():
            return _newest_log_in(self.log_path)
        return self.log_path

    def read_payload(self) -> str:
        log_file = self.find_log_file()
        if log_file is None:
            return SAMPLE_POD_LOG
        return log_file.read_text(encoding="utf-8", errors="replace")
