from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from .config import VerifierConfig, load_verifier_config
from .contracts import Block, InspectedBlock
from .errors import MalformedChainError
from .factory import BlockFactory, Clock
from .inspector import ChainInspector, summarize
from .signing import make_signer

logger = logging.getLogger(__name__)


class Verifier:
    """
    Single authority over one secret.

    Mints linked, signed blocks and inspects/repairs whole chains. Holds no
    chain state between calls: chains are passed in and new lists returned.
    """

    def __init__(self, config: VerifierConfig, *, clock: Optional[Clock] = None) -> None:
        config.validate()
        self._digest = config.digest
        self._algorithm = config.signature_algorithm
        signer = make_signer(config.signature_algorithm, config.secret, digest=config.digest)
        self._factory = BlockFactory(
            signer=signer,
            digest=config.digest,
            max_data_bytes=config.max_data_bytes,
            clock=clock,
        )
        self._inspector = ChainInspector(self._factory)
        logger.info(
            "verifier ready digest=%s signature=%s max_data_bytes=%d",
            config.digest,
            config.signature_algorithm,
            config.max_data_bytes,
        )

    @classmethod
    def from_env(cls, *, clock: Optional[Clock] = None) -> "Verifier":
        return cls(load_verifier_config(), clock=clock)

    @property
    def genesis_previous_hash(self) -> str:
        return self._factory.genesis_previous_hash

    def create_block(self, prior: Optional[Block], data: str) -> Block:
        return self._factory.create_block(prior, data)

    def inspect(self, chain: Sequence[Block]) -> List[InspectedBlock]:
        return self._inspector.inspect(chain)

    def verify_block(self, block: Block) -> bool:
        """Self-consistency of a single block; its link is not checked."""
        if not isinstance(block, Block):
            raise MalformedChainError(f"expected a Block, got {type(block).__name__}")
        return self._inspector.is_self_intact(block)

    def hash_block(self, block: Block) -> str:
        return self._factory.hash_fields(
            index=block.index,
            timestamp=block.timestamp,
            data=block.data,
            previous_hash=block.previous_hash,
        )

    @staticmethod
    def summarize(results: Iterable[InspectedBlock]) -> Dict[str, int]:
        return summarize(results)

    def __repr__(self) -> str:
        return f"Verifier(digest={self._digest!r}, signature_algorithm={self._algorithm!r})"
