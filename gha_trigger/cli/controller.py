from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Callable, List, Mapping, Optional, TextIO

from gha_trigger.app_factory import TriggerApp, create_app
from gha_trigger.cli.reporter import Reporter
from gha_trigger.config.ini_config import AppSettings, IniConfig
from gha_trigger.domain.errors import TriggerError
from gha_trigger.domain.models import AnalysisMode
from gha_trigger.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _positive_float(raw: str) -> float:
    value = float(raw)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {raw}")
    return value


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="gha-trigger",
        description="Verify an access code, summarize pod logs and trigger the GitHub workflow.",
    )
    ap.add_argument("access_code", nargs="?", help="Shared access code (checked against ACCESS_CODE_HASH).")
    ap.add_argument(
        "--analysis",
        choices=[m.value for m in AnalysisMode],
        default=AnalysisMode.GENERATE.value,
        help="generate: LLM summary with default fallback; static: default text; omit: access code only.",
    )
    ap.add_argument("--log-file", type=Path, help="Log file, or directory holding *.log files, to analyze.")
    ap.add_argument("--timeout", type=_positive_float, help="Seconds to wait for the workflow command.")
    ap.add_argument("--log-level", help="Logging level (default from LOG_LEVEL or INFO).")
    return ap


def _apply_overrides(settings: AppSettings, args: argparse.Namespace) -> AppSettings:
    changes = {}
    if args.log_file is not None:
        changes["log_path"] = args.log_file.expanduser().resolve()
    if args.timeout is not None:
        changes["timeout_seconds"] = args.timeout
    if args.log_level:
        changes["log_level"] = args.log_level.upper()
    return dataclasses.replace(settings, **changes) if changes else settings


def main(
    argv: Optional[List[str]] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
    out: Optional[TextIO] = None,
    app_factory: Callable[..., TriggerApp] = create_app,
) -> int:
    out = out or sys.stdout
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.access_code:
        # Usage is not an error exit
        parser.print_usage(out)
        return 0

    try:
        settings = _apply_overrides(IniConfig.from_env_or_default(env).load_settings(), args)
    except (FileNotFoundError, ValueError) as e:
        return Reporter(out=out).report_error(e)

    setup_logging(settings.log_level)
    app = app_factory(settings, mode=AnalysisMode(args.analysis), out=out)

    try:
        outcome = app.service.run(args.access_code, AnalysisMode(args.analysis))
    except (TriggerError, OSError) as e:
        logger.debug("Run aborted: %s", type(e).__name__)
        return app.reporter.report_error(e)

    return app.reporter.report(outcome)
