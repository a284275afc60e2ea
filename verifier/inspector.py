from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable, List, Sequence

from .contracts import Block, InspectedBlock, Status
from .errors import MalformedChainError
from .factory import BlockFactory

logger = logging.getLogger(__name__)


def check_structure(chain: Sequence[Block]) -> None:
    """
    Structural precondition for inspection (fail-closed):
    - every element is a Block
    - index values are 0..n-1 in order
    - previous_hash is a non-empty string
    - timestamp/data/hash/signature are strings
    """
    for pos, b in enumerate(chain):
        if not isinstance(b, Block):
            raise MalformedChainError(
                f"element {pos} is not a Block ({type(b).__name__})",
                meta={"position": pos},
            )
        if isinstance(b.index, bool) or not isinstance(b.index, int) or b.index != pos:
            raise MalformedChainError(
                f"index non-contiguous: expected {pos}, got {b.index!r}",
                meta={"position": pos, "index": b.index},
            )
        if not isinstance(b.previous_hash, str) or not b.previous_hash:
            raise MalformedChainError(
                f"previous_hash missing at index={pos}",
                meta={"position": pos},
            )
        for name in ("timestamp", "data", "hash", "signature"):
            if not isinstance(getattr(b, name), str):
                raise MalformedChainError(
                    f"{name} must be a string at index={pos}",
                    meta={"position": pos, "field": name},
                )


class ChainInspector:
    def __init__(self, factory: BlockFactory) -> None:
        self._factory = factory

    def is_self_intact(self, block: Block) -> bool:
        recomputed = self._factory.hash_fields(
            index=block.index,
            timestamp=block.timestamp,
            data=block.data,
            previous_hash=block.previous_hash,
        )
        if recomputed != block.hash:
            return False
        return self._factory.verify_signature(recomputed, block.signature)

    def inspect(self, chain: Sequence[Block]) -> List[InspectedBlock]:
        """
        Single forward pass, oldest-first.

        Valid     : self-intact and linked to the (possibly repaired) predecessor
        Tampered  : own hash/signature do not match own fields; resealed over the
                    current fields and relinked
        Recovered : own fields intact but the link broke because an ancestor was
                    resealed; relinked and resealed

        The input is never mutated; repaired blocks are new instances.
        """
        chain = list(chain)
        if not chain:
            return []
        check_structure(chain)

        out: List[InspectedBlock] = []
        expected_prev = self._factory.genesis_previous_hash

        for b in chain:
            self_intact = self.is_self_intact(b)
            link_intact = b.previous_hash == expected_prev

            if self_intact and link_intact:
                status = Status.valid
                emitted = b
            else:
                status = Status.recovered if self_intact else Status.tampered
                emitted = self._factory.seal(
                    index=b.index,
                    timestamp=b.timestamp,
                    data=b.data,
                    previous_hash=expected_prev,
                )
                if status is Status.tampered:
                    logger.warning("tampered block detected index=%d", b.index)

            expected_prev = emitted.hash
            out.append(InspectedBlock(block=emitted, status=status))

        counts = summarize(out)
        logger.info(
            "inspected chain length=%d valid=%d tampered=%d recovered=%d",
            len(out),
            counts[Status.valid.value],
            counts[Status.tampered.value],
            counts[Status.recovered.value],
        )
        return out


def summarize(results: Iterable[InspectedBlock]) -> Dict[str, int]:
    counts = Counter(r.status for r in results)
    return {s.value: counts.get(s, 0) for s in Status}


def repaired_chain(results: Iterable[InspectedBlock]) -> List[Block]:
    return [r.block for r in results]
