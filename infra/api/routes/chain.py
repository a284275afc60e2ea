# infra/api/routes/chain.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from infra.api.deps import get_chain_store, get_verifier
from infra.api.schemas import (
    AckOut,
    BlockOut,
    ChainOut,
    CreateIn,
    CreateOut,
    InformationItem,
    InformationOut,
    TamperIn,
)

router = APIRouter(prefix="/api", tags=["chain"])


@router.post("/create", response_model=CreateOut)
def create(payload: CreateIn, verifier=Depends(get_verifier), store=Depends(get_chain_store)) -> CreateOut:
    """
    Mint a block on the current tail and append it.
    Tail read, mint and append happen under the store lock.
    """
    block = store.append(lambda tail: verifier.create_block(tail, payload.data))
    return CreateOut(block=BlockOut.from_block(block))


@router.get("/information", response_model=InformationOut)
def information(
    newest_first: bool = Query(False, description="Display order only; storage stays oldest-first."),
    verifier=Depends(get_verifier),
    store=Depends(get_chain_store),
) -> InformationOut:
    """
    Inspect the whole chain and replace storage with the repaired chain.
    An empty chain is a 404 (EmptyChainError from the store).
    """
    results = store.inspect_and_replace(verifier.inspect)
    items = [InformationItem.from_inspected(r) for r in results]
    if newest_first:
        items.reverse()
    return InformationOut(
        count=len(items),
        summary=verifier.summarize(results),
        information=items,
    )


@router.post("/tamper", response_model=AckOut)
def tamper(payload: TamperIn, store=Depends(get_chain_store)) -> AckOut:
    """
    Demonstration hook: edit a block's data out of band (no reseal).
    """
    store.tamper(payload.index, payload.new_data)
    return AckOut()


@router.get("/chain", response_model=ChainOut)
def chain(store=Depends(get_chain_store)) -> ChainOut:
    blocks = store.snapshot()
    return ChainOut(count=len(blocks), blocks=[BlockOut.from_block(b) for b in blocks])
