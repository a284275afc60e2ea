from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Sequence

import pytest

from infra.api import deps
from verifier.config import VerifierConfig
from verifier.contracts import Block
from verifier.engine import Verifier

TEST_SECRET = "some-super-seekrit-key"


class StepClock:
    """Deterministic clock: each call advances one second."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture(autouse=True)
def _isolate_verifier_env(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "VERIFIER_SECRET",
        "VERIFIER_DIGEST",
        "VERIFIER_SIGNATURE_ALGO",
        "VERIFIER_MAX_DATA_BYTES",
        "VERIFIER_CONFIG_PATH",
        "VERIFIER_LOG_LEVEL",
        "VERIFIER_LOG_MODULES",
        "VERIFIER_LOG_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    deps.reset_state()
    yield
    deps.reset_state()


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # drop the plain handlers setup_logging() installs on the root logger
    root = logging.getLogger()
    level = root.level
    yield
    for h in root.handlers[:]:
        if type(h) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def config() -> VerifierConfig:
    return VerifierConfig(secret=TEST_SECRET)


@pytest.fixture
def verifier(config: VerifierConfig, clock: StepClock) -> Verifier:
    return Verifier(config, clock=clock)


@pytest.fixture
def make_chain(verifier: Verifier) -> Callable[[Sequence[str]], List[Block]]:
    def _make(datas: Sequence[str]) -> List[Block]:
        chain: List[Block] = []
        for d in datas:
            chain.append(verifier.create_block(chain[-1] if chain else None, d))
        return chain

    return _make
