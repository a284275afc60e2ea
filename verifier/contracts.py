from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any, Dict, Mapping

from .errors import MalformedChainError


class Status(StrEnum):
    recovered = "Recovered"
    valid = "Valid"
    tampered = "Tampered"

    @property
    def ordinal(self) -> int:
        """Wire ordinal. Stable across versions; never renumber."""
        return _ORDINALS[self]


_ORDINALS: Dict[Status, int] = {
    Status.recovered: 0,
    Status.valid: 1,
    Status.tampered: 2,
}


BLOCK_FIELDS = ("index", "timestamp", "data", "previous_hash", "hash", "signature")


@dataclass(frozen=True)
class Block:
    index: int
    timestamp: str
    data: str
    previous_hash: str
    hash: str
    signature: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, obj: Mapping[str, Any]) -> "Block":
        missing = [k for k in BLOCK_FIELDS if k not in obj]
        if missing:
            raise MalformedChainError(
                f"block missing fields: {', '.join(missing)}",
                meta={"missing": missing},
            )
        index = obj["index"]
        if isinstance(index, bool) or not isinstance(index, int):
            raise MalformedChainError(f"block index must be an integer, got {type(index).__name__}")
        for k in BLOCK_FIELDS[1:]:
            if not isinstance(obj[k], str):
                raise MalformedChainError(
                    f"block field {k!r} must be a string",
                    meta={"index": index, "field": k},
                )
            try:
                obj[k].encode("utf-8")
            except UnicodeEncodeError as exc:
                raise MalformedChainError(
                    f"block field {k!r} is not valid UTF-8",
                    meta={"index": index, "field": k},
                ) from exc
        return cls(**{k: obj[k] for k in BLOCK_FIELDS})


@dataclass(frozen=True)
class InspectedBlock:
    block: Block
    status: Status

    def to_dict(self) -> Dict[str, Any]:
        return {
            "block": self.block.to_dict(),
            "status": self.status.value,
            "ordinal": self.status.ordinal,
        }
