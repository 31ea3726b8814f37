from __future__ import annotations

import os
import time
from pathlib import Path

import pytest

from gha_trigger.repositories.log_repository import SAMPLE_POD_LOG, LogRepository


def _write_log(path: Path, text: str, mtime: float) -> Path:
    path.write_text(text, encoding="utf-8")
    # Set file mtime deterministically
    os.utime(path, (mtime, mtime))
    return path


def test_no_path_returns_bundled_sample():
    repo = LogRepository(None)

    assert repo.find_log_file() is None
    assert repo.read_payload() == SAMPLE_POD_LOG
    assert "Out of memory error" in SAMPLE_POD_LOG


def test_file_path_is_read(tmp_path: Path):
    log = _write_log(tmp_path / "pod.log", "2023-11-19T12:30:00Z [info] up\n", time.time())

    repo = LogRepository(log)

    assert repo.find_log_file() == log
    assert repo.read_payload() == "2023-11-19T12:30:00Z [info] up\n"


def test_directory_picks_newest_log(tmp_path: Path):
    t0 = time.time()
    _write_log(tmp_path / "older.log", "old", t0 - 100)
    newest = _write_log(tmp_path / "newest.log", "new", t0 - 10)
    _write_log(tmp_path / "notes.txt", "ignored", t0)     # not a *.log

    repo = LogRepository(tmp_path)

    assert repo.find_log_file() == newest
    assert repo.read_payload() == "new"


def test_directory_without_logs_falls_back_to_sample(tmp_path: Path):
    (tmp_path / "readme.md").write_text("x", encoding="utf-8")

    assert LogRepository(tmp_path).read_payload() == SAMPLE_POD_LOG


def test_missing_path_raises(tmp_path: Path):
    repo = LogRepository(tmp_path / "nope.log")

    with pytest.raises(FileNotFoundError):
        repo.read_payload()


def test_undecodable_bytes_are_replaced(tmp_path: Path):
    log = tmp_path / "binary.log"
    log.write_bytes(b"ok \xff\xfe end")

    assert LogRepository(log).read_payload() == "ok \ufffd\ufffd end"
