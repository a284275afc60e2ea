"""
verifier package

Tamper-evident, self-healing block chain core:
- BlockFactory mints linked, signed blocks
- ChainInspector classifies every block (Valid / Tampered / Recovered) and
  repairs links so the chain stays usable
- Verifier owns both behind one secret
"""

from __future__ import annotations

from .config import VerifierConfig, load_verifier_config, load_verifier_config_from_env
from .contracts import Block, InspectedBlock, Status
from .engine import Verifier
from .errors import (
    ConfigError,
    InvalidInputError,
    InvalidSecretKeyError,
    MalformedChainError,
    VerifierError,
)
from .inspector import repaired_chain, summarize

__all__ = [
    "Block",
    "ConfigError",
    "InspectedBlock",
    "InvalidInputError",
    "InvalidSecretKeyError",
    "MalformedChainError",
    "Status",
    "Verifier",
    "VerifierConfig",
    "VerifierError",
    "load_verifier_config",
    "load_verifier_config_from_env",
    "repaired_chain",
    "summarize",
]
