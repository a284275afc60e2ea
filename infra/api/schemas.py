from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from verifier.contracts import Block, InspectedBlock, Status


class CreateIn(BaseModel):
    # Acceptance policy (empty / size) lives in the core, not here.
    data: str


class TamperIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    index: int
    new_data: str = Field(alias="newData")


class BlockOut(BaseModel):
    index: int
    timestamp: str
    data: str
    previous_hash: str
    hash: str
    signature: str

    @classmethod
    def from_block(cls, block: Block) -> "BlockOut":
        return cls(**block.to_dict())


class CreateOut(BaseModel):
    success: bool = True
    block: BlockOut


class InformationItem(BaseModel):
    index: int
    data: str
    status: Status
    ordinal: int

    @classmethod
    def from_inspected(cls, item: InspectedBlock) -> "InformationItem":
        return cls(
            index=item.block.index,
            data=item.block.data,
            status=item.status,
            ordinal=item.status.ordinal,
        )


class InformationOut(BaseModel):
    success: bool = True
    count: int
    summary: Dict[str, int]
    information: List[InformationItem] = Field(default_factory=list)


class ChainOut(BaseModel):
    count: int
    blocks: List[BlockOut] = Field(default_factory=list)


class AckOut(BaseModel):
    success: bool = True
