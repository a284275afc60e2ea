from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError, InvalidSecretKeyError
from .hasher import SUPPORTED_DIGESTS
from .signing import SUPPORTED_SIGNATURE_ALGORITHMS

DEFAULT_MAX_DATA_BYTES = 4096

ENV_SECRET = "VERIFIER_SECRET"
ENV_DIGEST = "VERIFIER_DIGEST"
ENV_SIGNATURE_ALGO = "VERIFIER_SIGNATURE_ALGO"
ENV_MAX_DATA_BYTES = "VERIFIER_MAX_DATA_BYTES"
ENV_CONFIG_PATH = "VERIFIER_CONFIG_PATH"


@dataclass(frozen=True)
class VerifierConfig:
    secret: str = field(repr=False)
    digest: str = "sha256"
    signature_algorithm: str = "hmac"
    max_data_bytes: int = DEFAULT_MAX_DATA_BYTES

    @classmethod
    def from_mapping(cls, obj: Mapping[str, Any]) -> "VerifierConfig":
        return cls(
            secret=str(obj.get("secret") or ""),
            digest=str(obj.get("digest") or "sha256"),
            signature_algorithm=str(obj.get("signature_algorithm") or obj.get("algorithm") or "hmac"),
            max_data_bytes=_coerce_int(obj.get("max_data_bytes", DEFAULT_MAX_DATA_BYTES), "max_data_bytes"),
        )

    def validate(self) -> "VerifierConfig":
        if not self.secret:
            raise InvalidSecretKeyError("verifier secret is empty (set VERIFIER_SECRET)")
        if self.digest not in SUPPORTED_DIGESTS:
            raise ConfigError(
                f"unsupported digest: {self.digest!r}",
                meta={"supported": list(SUPPORTED_DIGESTS)},
            )
        if self.signature_algorithm not in SUPPORTED_SIGNATURE_ALGORITHMS:
            raise ConfigError(
                f"unsupported signature algorithm: {self.signature_algorithm!r}",
                meta={"supported": list(SUPPORTED_SIGNATURE_ALGORITHMS)},
            )
        if self.max_data_bytes <= 0:
            raise ConfigError(f"max_data_bytes must be positive, got {self.max_data_bytes}")
        return self


def _coerce_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc


def _env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if env.get(ENV_SECRET):
        out["secret"] = env[ENV_SECRET]
    if env.get(ENV_DIGEST, "").strip():
        out["digest"] = env[ENV_DIGEST].strip()
    if env.get(ENV_SIGNATURE_ALGO, "").strip():
        out["signature_algorithm"] = env[ENV_SIGNATURE_ALGO].strip()
    if env.get(ENV_MAX_DATA_BYTES, "").strip():
        out["max_data_bytes"] = _coerce_int(env[ENV_MAX_DATA_BYTES].strip(), ENV_MAX_DATA_BYTES)
    return out


def load_verifier_config_from_env(env: Optional[Mapping[str, str]] = None) -> VerifierConfig:
    env = os.environ if env is None else env
    return VerifierConfig.from_mapping(_env_overrides(env)).validate()


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"config file unreadable: {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"config file is not valid YAML: {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"config file must hold a mapping: {path}")
    # Either a top-level "verifier:" section or the keys directly.
    section = data.get("verifier", data)
    if not isinstance(section, dict):
        raise ConfigError(f"'verifier' section must be a mapping: {path}")
    return section


def load_verifier_config(
    path: Optional[str | Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> VerifierConfig:
    """
    YAML file (argument, else VERIFIER_CONFIG_PATH) overlaid by VERIFIER_* env vars.
    Without a file this is load_verifier_config_from_env().
    """
    env = os.environ if env is None else env
    if path is None and env.get(ENV_CONFIG_PATH, "").strip():
        path = env[ENV_CONFIG_PATH].strip()

    base = VerifierConfig.from_mapping(_load_yaml(Path(path).expanduser())) if path else VerifierConfig(secret="")
    return replace(base, **_env_overrides(env)).validate()
