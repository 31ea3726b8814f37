from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TextIO

from gha_trigger.cli.reporter import Reporter
from gha_trigger.config.ini_config import AppSettings
from gha_trigger.domain.models import AnalysisMode
from gha_trigger.repositories.log_repository import LogRepository
from gha_trigger.services.content_providers import ContentProvider, StaticContentProvider, build_content_provider
from gha_trigger.services.process_dispatcher import ProcessDispatcher, WorkflowCommand
from gha_trigger.services.secret_verifier import SecretVerifier
from gha_trigger.services.trigger_service import TriggerService


@dataclass(frozen=True)
class TriggerApp:
    settings: AppSettings
    service: TriggerService
    reporter: Reporter


def create_app(
    settings: AppSettings,
    *,
    mode: AnalysisMode = AnalysisMode.GENERATE,
    out: Optional[TextIO] = None,
    dispatcher: Optional[ProcessDispatcher] = None,
    content_provider: Optional[ContentProvider] = None,
) -> TriggerApp:
    """Composition root: settings are built once by the caller and passed down."""
    if content_provider is None:
        content_provider = build_content_provider(settings) if mode is AnalysisMode.GENERATE else StaticContentProvider()

    if dispatcher is None:
        command = WorkflowCommand(
            workflow=settings.workflow,
            ref=settings.workflow_ref,
            repo=settings.workflow_repo,
        )
        dispatcher = ProcessDispatcher(command=command, timeout_seconds=settings.timeout_seconds)

    service = TriggerService(
        verifier=SecretVerifier(settings.access_code_hash),
        content_provider=content_provider,
        log_repo=LogRepository(settings.log_path),
        dispatcher=dispatcher,
    )

    return TriggerApp(
        settings=settings,
        service=service,
        reporter=Reporter(out=out, timeout_seconds=settings.timeout_seconds),
    )
