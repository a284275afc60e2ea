from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from infra.storage.chain_store import InMemoryChainStore
    from verifier.engine import Verifier

# NOTE:
# The verifier is built once per process from VERIFIER_* configuration and is
# the only holder of the secret. The chain store is the authoritative chain.

# singletons (lazy)
_VERIFIER: Optional["Verifier"] = None
_CHAIN_STORE: Optional["InMemoryChainStore"] = None


def get_verifier() -> "Verifier":
    global _VERIFIER
    if _VERIFIER is None:
        from verifier.engine import Verifier
        _VERIFIER = Verifier.from_env()
    return _VERIFIER


def get_chain_store() -> "InMemoryChainStore":
    global _CHAIN_STORE
    if _CHAIN_STORE is None:
        from infra.storage.chain_store import InMemoryChainStore
        _CHAIN_STORE = InMemoryChainStore()
    return _CHAIN_STORE


def reset_state() -> None:
    """Drop the singletons (tests / config reload)."""
    global _VERIFIER, _CHAIN_STORE
    _VERIFIER = None
    _CHAIN_STORE = None
