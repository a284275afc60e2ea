from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional


@dataclass(frozen=True)
class VerifierError(Exception):
    """
    Core-level verifier error.

    code: stable machine-readable code (class level)
    http_status: intended mapping for the transport layer
    detail: human readable
    meta: optional structured diagnostics (never carries key material)
    """

    detail: str
    meta: Optional[Dict[str, Any]] = None

    code: ClassVar[str] = "VERIFIER_ERROR"
    http_status: ClassVar[int] = 400

    def __str__(self) -> str:
        return f"{self.code}: {self.detail}"


class InvalidInputError(VerifierError):
    """Block payload failed the acceptance policy."""

    code = "INVALID_INPUT"
    http_status = 400


class MalformedChainError(VerifierError):
    """Structural precondition violated by the caller (not a tamper scenario)."""

    code = "MALFORMED_CHAIN"
    http_status = 409


class ConfigError(VerifierError):
    code = "CONFIG_INVALID"
    http_status = 500


class InvalidSecretKeyError(ConfigError):
    code = "SECRET_INVALID"
