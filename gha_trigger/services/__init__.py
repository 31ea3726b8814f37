from .arg_sanitizer import escape_for_cli, unescape_from_cli
from .content_providers import ContentProvider, LlmContentProvider, StaticContentProvider, build_content_provider
from .process_dispatcher import ProcessDispatcher, WorkflowCommand
from .secret_verifier import SecretVerifier, hash_secret, verify_secret
from .trigger_service import TriggerService

__all__ = [
    "ContentProvider",
    "LlmContentProvider",
    "StaticContentProvider",
    "build_content_provider",
    "ProcessDispatcher",
    "WorkflowCommand",
    "SecretVerifier",
    "hash_secret",
    "verify_secret",
    "TriggerService",
    "escape_for_cli",
    "unescape_from_cli",
]
