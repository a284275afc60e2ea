from __future__ import annotations

import hashlib
from typing import Dict, Tuple

from .errors import ConfigError, MalformedChainError


ENCODING_VERSION = 1

SUPPORTED_DIGESTS: Tuple[str, ...] = ("sha256", "sha512", "blake2b", "sha3_256")

# First field of every encoded block. Bump together with ENCODING_VERSION.
_VERSION_TAGS: Dict[int, bytes] = {1: b"block.v1"}

_LEN_BYTES = 8


def _frame(part: bytes) -> bytes:
    return len(part).to_bytes(_LEN_BYTES, "big") + part


def _check_digest(digest: str) -> str:
    if digest not in SUPPORTED_DIGESTS:
        raise ConfigError(
            f"unsupported digest: {digest!r}",
            meta={"supported": list(SUPPORTED_DIGESTS)},
        )
    return digest


def genesis_previous_hash(digest: str = "sha256") -> str:
    """All-zero hex digest of the configured width, used as the genesis link."""
    return "0" * (hashlib.new(_check_digest(digest)).digest_size * 2)


def encode_block_fields(
    *,
    index: int,
    timestamp: str,
    data: str,
    previous_hash: str,
    version: int = ENCODING_VERSION,
) -> bytes:
    """
    Versioned, length-prefixed encoding of the hashed block fields:
      frame(tag) | frame(index as u64 BE) | frame(timestamp) | frame(data) | frame(previous_hash)
    frame(x) = u64 BE byte length of x followed by x.
    """
    tag = _VERSION_TAGS.get(version)
    if tag is None:
        raise ConfigError(f"unknown block encoding version: {version!r}")
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < 2 ** 64:
        raise MalformedChainError(f"block index must be a non-negative integer, got {index!r}")

    parts = [tag, index.to_bytes(_LEN_BYTES, "big")]
    for name, value in (("timestamp", timestamp), ("data", data), ("previous_hash", previous_hash)):
        try:
            parts.append(value.encode("utf-8"))
        except UnicodeEncodeError as exc:
            raise MalformedChainError(
                f"block field {name!r} is not valid UTF-8 at index={index}",
                meta={"index": index, "field": name},
            ) from exc
    return b"".join(_frame(p) for p in parts)


def compute_block_hash(
    *,
    index: int,
    timestamp: str,
    data: str,
    previous_hash: str,
    digest: str = "sha256",
) -> str:
    payload = encode_block_fields(
        index=index,
        timestamp=timestamp,
        data=data,
        previous_hash=previous_hash,
    )
    return hashlib.new(_check_digest(digest), payload).hexdigest()
