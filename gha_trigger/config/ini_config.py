########## ini_config.py

import os
from configparser import ConfigParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

INI_DEFAULT_NAME = "gha_trigger.ini"

DEFAULT_WORKFLOW = "simple-log-analysis-test.yml"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_API_VERSION = "2024-06-01"


@dataclass(frozen=True)
class AppSettings:
    # Secrets are kept out of repr so a logged settings object never leaks them
    access_code_hash: str = field(repr=False)

    workflow: str
    workflow_ref: str
    workflow_repo: str
    timeout_seconds: float

    endpoint: str
    api_key: str = field(repr=False)
    model: str
    api_version: str
    temperature: float
    max_tokens: int

    log_path: Optional[Path]
    log_level: str

    @property
    def llm_configured(self) -> bool:
        return bool(self.endpoint and self.api_key and self.model)


class IniConfig:
    """
    Adapter around ConfigParser + environment overrides.
    Keeps INI/env handling out of the service code.
    """

    def __init__(self, ini_path: Optional[Path] = None, env: Optional[Mapping[str, str]] = None, *, required: bool = True):
        self._ini_path = ini_path
        self._env = os.environ if env is None else env
        self._cfg = ConfigParser()
        if ini_path is not None:
            read_ok = self._cfg.read(str(ini_path), encoding="utf-8-sig")
            if not read_ok and required:
                raise FileNotFoundError(f"INI file not found or unreadable: {ini_path}")

    @staticmethod
    def from_env_or_default(env: Optional[Mapping[str, str]] = None) -> "IniConfig":
        env = os.environ if env is None else env
        ini_raw = (env.get("APP_INI") or "").strip()
        if ini_raw:
            return IniConfig(Path(ini_raw), env)
        # If APP_INI is not set, fall back to a repo-root ini when one exists
        default_path = Path(__file__).resolve().parents[2] / INI_DEFAULT_NAME
        return IniConfig(default_path, env, required=False)

    def _value(self, section: str, key: str, env_name: Optional[str] = None, fallback: str = "") -> str:
        """Environment wins over INI; blank values count as unset."""
        if env_name:
            raw = (self._env.get(env_name) or "").strip()
            if raw:
                return raw
        return (self._cfg.get(section, key, fallback=fallback) or "").strip() or fallback

    def _float(self, section: str, key: str, env_name: Optional[str], fallback: float) -> float:
        raw = self._value(section, key, env_name)
        if not raw:
            return fallback
        try:
            return float(raw)
        except ValueError as e:
            raise ValueError(f"Invalid number for [{section}] {key}: {raw!r}") from e

    def _path(self, section: str, key: str, env_name: Optional[str]) -> Optional[Path]:
        raw = self._value(section, key, env_name)
        if not raw:
            return None
        raw = os.path.expandvars(os.path.expanduser(raw))
        return Path(raw).resolve()

    def load_settings(self) -> AppSettings:
        # Auth
        access_code_hash = self._value("auth", "access_code_hash", "ACCESS_CODE_HASH")

        # Workflow / execution
        workflow = self._value("workflow", "file", "WORKFLOW_FILE", fallback=DEFAULT_WORKFLOW)
        workflow_ref = self._value("workflow", "ref", "WORKFLOW_REF")
        workflow_repo = self._value("workflow", "repo", "WORKFLOW_REPO")
        timeout_seconds = self._float("execution", "timeout_seconds", "TRIGGER_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)

        # Analysis backend (only read by the content provider)
        endpoint = self._value("analysis", "endpoint", "ENDPOINT")
        api_key = self._value("analysis", "api_key", "API_KEY")
        model = self._value("analysis", "model", "MODEL")
        api_version = self._value("analysis", "api_version", "OPENAI_API_VERSION", fallback=DEFAULT_API_VERSION)
        temperature = self._float("analysis", "temperature", None, 0.7)
        max_tokens = int(self._float("analysis", "max_tokens", None, 1000))

        # Log source + logging
        log_path = self._path("logs", "path", "LOG_PATH")
        log_level = self._value("logging", "level", "LOG_LEVEL", fallback="INFO").upper()

        # Validate
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")
        if max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {max_tokens}")

        return AppSettings(
            access_code_hash=access_code_hash,
            workflow=workflow,
            workflow_ref=workflow_ref,
            workflow_repo=workflow_repo,
            timeout_seconds=timeout_seconds,
            endpoint=endpoint,
            api_key=api_key,
            model=model,
            api_version=api_version,
            temperature=temperature,
            max_tokens=max_tokens,
            log_path=log_path,
            log_level=log_level,
        )
