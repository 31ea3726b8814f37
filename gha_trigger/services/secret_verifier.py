from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import Optional

from gha_trigger.domain.errors import ConfigurationMissingError


def hash_secret(secret: str) -> str:
    """SHA-256 of the UTF-8 bytes, lowercase hex."""
    # surrogateescape keeps non-UTF-8 argv bytes (POSIX) hashable as the original bytes
    return hashlib.sha256(secret.encode("utf-8", errors="surrogateescape")).hexdigest()


def verify_secret(secret: str, fingerprint: Optional[str]) -> bool:
    expected = (fingerprint or "").strip().lower()
    if not expected:
        raise ConfigurationMissingError(
            "ACCESS_CODE_HASH is not set. Please set it before running the application."
        )

    computed = hash_secret(secret)
    # compare_digest on bytes: str arguments must be ASCII-only
    return hmac.compare_digest(computed.encode("ascii"), expected.encode("utf-8"))


@dataclass(frozen=True)
class SecretVerifier:
    """Checks an access code against the configured SHA-256 fingerprint."""
    fingerprint: str

    def __repr__(self) -> str:
        return "SecretVerifier(fingerprint=***)"

    def verify(self, secret: str) -> bool:
        return verify_secret(secret, self.fingerprint)
