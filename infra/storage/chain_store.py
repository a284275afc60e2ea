from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Callable, List, Optional, Sequence

from verifier.contracts import Block, InspectedBlock

logger = logging.getLogger(__name__)


class ChainStoreError(RuntimeError):
    code = "CHAIN_STORE"
    http_status = 400


class EmptyChainError(ChainStoreError):
    code = "CHAIN_EMPTY"
    http_status = 404

    def __init__(self, message: str = "No blocks found") -> None:
        super().__init__(message)


class InMemoryChainStore:
    """
    Authoritative chain for the transport layer (process memory only).
    - Oldest-first, always.
    - Append-and-link and inspect-and-replace run under one lock so two writers
      can never extend the same tail.
    - Inspection output replaces storage; it is never merged.
    """

    def __init__(self, blocks: Optional[Sequence[Block]] = None) -> None:
        self._blocks: List[Block] = list(blocks or [])
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._blocks)

    def snapshot(self) -> List[Block]:
        with self._lock:
            return list(self._blocks)

    def append(self, mint: Callable[[Optional[Block]], Block]) -> Block:
        # mint raises before anything is stored
        with self._lock:
            tail = self._blocks[-1] if self._blocks else None
            block = mint(tail)
            self._blocks.append(block)
            return block

    def inspect_and_replace(
        self, inspect: Callable[[Sequence[Block]], List[InspectedBlock]]
    ) -> List[InspectedBlock]:
        with self._lock:
            if not self._blocks:
                raise EmptyChainError()
            results = inspect(list(self._blocks))
            self._blocks = [r.block for r in results]
            return results

    def tamper(self, index: int, new_data: str) -> Block:
        """Out-of-band edit: swaps `data` and leaves hash/signature untouched."""
        try:
            new_data.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ChainStoreError("new data must be valid UTF-8") from exc
        with self._lock:
            if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._blocks):
                raise ChainStoreError(f"Invalid block index: {index!r}")
            edited = replace(self._blocks[index], data=new_data)
            self._blocks[index] = edited
            logger.info("block data edited out of band index=%d", index)
            return edited
