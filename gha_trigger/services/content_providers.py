from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import AzureChatOpenAI

from gha_trigger.config.ini_config import AppSettings
from gha_trigger.domain.errors import AnalysisUnavailableError
from gha_trigger.domain.models import AnalysisResult

logger = logging.getLogger(__name__)

DEFAULT_ANALYSIS = AnalysisResult(
    title="Pod health check: automated analysis unavailable",
    body=(
        "Automated log analysis could not be generated for this run.\n"
        "Review the pod logs attached to the workflow run for key events, warnings and errors."
    ),
)

SYSTEM_PROMPT = "You are a Kubernetes pod analysis assistant."

TITLE_PROMPT = """Analyze the following pod log data and create:
- A concise and descriptive title summarizing the pod health and issues (without prefixes like "Title:").

Pod Log Data:
{log_data}

[TASK]
Create:
- Summary: (Concise title summarizing the pod health and issues)
"""

ANALYSIS_PROMPT = """Analyze the following pod log data and create a structured summary including:
   - Key events related to pod lifecycle and health.
   - Warnings and errors with timestamps.
   - Recommendations for resolving issues if applicable.

Pod Log Data:
{log_data}

[TASK]
Create:
- Analysis:
  - Key Events:
    (List significant events chronologically)
  - Warnings and Errors:
    (Summarize warnings and errors with details and timestamps)
  - Recommendations:
    (Provide actionable recommendations based on the analysis)
"""

_TITLE_PREFIX_RE = re.compile(
    r"^\s*(?:\*\*\s*)?(?:title|summary|pod health summary)\s*:\s*(?:\*\*)?\s*",
    re.IGNORECASE,
)


def clean_title(raw: str) -> str:
    """Strip label prefixes ("**Title:**", "Pod Health Summary:") and wrapping quotes/markup."""
    title = (raw or "").strip()
    # Labels can be stacked, e.g. "Summary: Pod Health Summary: ..."
    while True:
        stripped = _TITLE_PREFIX_RE.sub("", title, count=1)
        if stripped == title:
            break
        title = stripped
    title = title.strip().strip("*").strip().strip('"').strip("'").strip()
    # Titles are single line
    return " ".join(title.split())


class ContentProvider:
    """Strategy interface: log text in, (title, body) out."""
    def generate(self, log_payload: str) -> AnalysisResult:
        raise NotImplementedError


@dataclass(frozen=True)
class StaticContentProvider(ContentProvider):
    result: AnalysisResult = DEFAULT_ANALYSIS

    def generate(self, log_payload: str) -> AnalysisResult:
        return self.result


class LlmContentProvider(ContentProvider):
    """
    Generates the issue title and analysis with a LangChain chat model.
    One call per field, no retries; any failure becomes AnalysisUnavailableError.
    """

    def __init__(self, chat_model: Any):
        self._llm = chat_model

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "LlmContentProvider":
        llm = AzureChatOpenAI(
            azure_endpoint=settings.endpoint,
            api_key=settings.api_key,
            azure_deployment=settings.model,
            api_version=settings.api_version,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            max_retries=0,
        )
        return cls(llm)

    def _ask(self, template: str, log_payload: str) -> str:
        msg = self._llm.invoke(
            [
                SystemMessage(content=SYSTEM_PROMPT),
                HumanMessage(content=template.format(log_data=log_payload)),
            ]
        )
        content = getattr(msg, "content", msg)
        return content.strip() if isinstance(content, str) else ""

    def generate(self, log_payload: str) -> AnalysisResult:
        try:
            title = clean_title(self._ask(TITLE_PROMPT, log_payload))
            body = self._ask(ANALYSIS_PROMPT, log_payload)
        except Exception as e:
            raise AnalysisUnavailableError(f"Analysis backend call failed: {e}") from e

        result = AnalysisResult(title=title, body=body)
        if not result.is_complete():
            raise AnalysisUnavailableError("Analysis backend returned an empty title or analysis.")
        return result


def build_content_provider(settings: AppSettings, chat_model: Optional[Any] = None) -> ContentProvider:
    if chat_model is not None:
        return LlmContentProvider(chat_model)
    if settings.llm_configured:
        return LlmContentProvider.from_settings(settings)
    logger.info("Analysis backend not configured (ENDPOINT, API_KEY, MODEL); using default content.")
    return StaticContentProvider()
