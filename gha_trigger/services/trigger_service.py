from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from gha_trigger.domain.errors import AnalysisUnavailableError, AuthenticationError
from gha_trigger.domain.models import AnalysisMode, AnalysisResult, InvocationSpec, ProcessOutcome
from gha_trigger.repositories.log_repository import LogRepository
from gha_trigger.services.arg_sanitizer import escape_for_cli
from gha_trigger.services.content_providers import DEFAULT_ANALYSIS, ContentProvider
from gha_trigger.services.process_dispatcher import ProcessDispatcher
from gha_trigger.services.secret_verifier import SecretVerifier

logger = logging.getLogger(__name__)


@dataclass
class TriggerService:
    """
    Service layer: verify -> (optional) analysis -> escape -> dispatch.
    Keeps the CLI controller thin. Raises for configuration/auth failures;
    every dispatch result comes back as a ProcessOutcome.
    """
    verifier: SecretVerifier
    content_provider: ContentProvider
    log_repo: LogRepository
    dispatcher: ProcessDispatcher
    fallback: AnalysisResult = DEFAULT_ANALYSIS

    def run(self, access_code: str, mode: AnalysisMode = AnalysisMode.GENERATE) -> ProcessOutcome:
        # Raises ConfigurationMissingError before hashing when no fingerprint is configured
        if not self.verifier.verify(access_code):
            raise AuthenticationError("Invalid access code. Access denied.")

        analysis = self.resolve_analysis(mode)

        spec = InvocationSpec(
            access_code=escape_for_cli(access_code),
            issue_title=escape_for_cli(analysis.title) if analysis else None,
            log_analysis=escape_for_cli(analysis.body) if analysis else None,
        )

        logger.info("Triggering GitHub Action...")
        return self.dispatcher.dispatch(spec)

    def resolve_analysis(self, mode: AnalysisMode) -> Optional[AnalysisResult]:
        if mode is AnalysisMode.OMIT:
            logger.info("Access code is valid. Skipping analysis.")
            return None
        if mode is AnalysisMode.STATIC:
            logger.info("Access code is valid. Using default analysis content.")
            return self.fallback

        logger.info("Access code is valid. Generating analysis...")
        try:
            result = self.content_provider.generate(self.log_repo.read_payload())
            if not result.is_complete():
                raise AnalysisUnavailableError("Analysis returned an empty title or body.")
        except AnalysisUnavailableError as e:
            logger.warning("Analysis unavailable, using default content: %s", e)
            return self.fallback

        logger.info("Analysis generated.")
        return result
