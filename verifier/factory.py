from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from .contracts import Block
from .errors import InvalidInputError, MalformedChainError
from .hasher import compute_block_hash, genesis_previous_hash

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


class BlockFactory:
    """
    Mints linked, signed blocks.

    Owns the hashing and sealing rules; the inspector reseals repaired blocks
    through the same code path so both always agree.
    """

    def __init__(
        self,
        *,
        signer,
        digest: str = "sha256",
        max_data_bytes: int = 4096,
        clock: Optional[Clock] = None,
    ) -> None:
        self._signer = signer
        self.digest = digest
        self.max_data_bytes = max_data_bytes
        self._clock = clock or utc_now
        self.genesis_previous_hash = genesis_previous_hash(digest)

    def validate_data(self, data: object) -> str:
        if not isinstance(data, str):
            raise InvalidInputError(f"data must be a string, got {type(data).__name__}")
        if not data.strip():
            raise InvalidInputError("data must not be empty")
        try:
            size = len(data.encode("utf-8"))
        except UnicodeEncodeError as exc:
            raise InvalidInputError("data must be valid UTF-8", meta={"position": exc.start}) from exc
        if size > self.max_data_bytes:
            raise InvalidInputError(
                f"data is {size} bytes, limit is {self.max_data_bytes}",
                meta={"size": size, "max_data_bytes": self.max_data_bytes},
            )
        return data

    def hash_fields(self, *, index: int, timestamp: str, data: str, previous_hash: str) -> str:
        return compute_block_hash(
            index=index,
            timestamp=timestamp,
            data=data,
            previous_hash=previous_hash,
            digest=self.digest,
        )

    def sign(self, hash_hex: str) -> str:
        return self._signer.sign(hash_hex)

    def verify_signature(self, hash_hex: str, signature: str) -> bool:
        return self._signer.verify(hash_hex, signature)

    def seal(self, *, index: int, timestamp: str, data: str, previous_hash: str) -> Block:
        h = self.hash_fields(index=index, timestamp=timestamp, data=data, previous_hash=previous_hash)
        return Block(
            index=index,
            timestamp=timestamp,
            data=data,
            previous_hash=previous_hash,
            hash=h,
            signature=self.sign(h),
        )

    def create_block(self, prior: Optional[Block], data: str) -> Block:
        data = self.validate_data(data)

        if prior is None:
            index = 0
            previous_hash = self.genesis_previous_hash
        else:
            if not isinstance(prior, Block):
                raise MalformedChainError(f"prior block must be a Block, got {type(prior).__name__}")
            if isinstance(prior.index, bool) or not isinstance(prior.index, int) or prior.index < 0:
                raise MalformedChainError(f"prior block index is invalid: {prior.index!r}")
            if not isinstance(prior.hash, str) or not prior.hash:
                raise MalformedChainError("prior block hash is empty", meta={"index": prior.index})
            index = prior.index + 1
            previous_hash = prior.hash

        block = self.seal(
            index=index,
            timestamp=format_timestamp(self._clock()),
            data=data,
            previous_hash=previous_hash,
        )
        logger.debug("minted block index=%d hash=%s", block.index, block.hash[:16])
        return block
